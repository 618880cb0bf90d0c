import collections
import logging
import re

from .errors import InvalidArgument, ParseError, RepositoryAccessError
from .gettext import _
from .signature import Signature

logger = logging.getLogger(__name__)

# A name (anything up to the '<') followed by an email in angle brackets
_name_and_email_re = re.compile(r"([^<]*)<([^<>]*)>")


class MailmapEntry(
    collections.namedtuple(
        "MailmapEntry", ["real_name", "real_email", "replace_name", "replace_email"]
    )
):
    """
    A single mailmap rule.  Commits recorded with replace_email (and, when
    given, replace_name) are attributed to real_name and real_email instead.
    A real_* field of None leaves that part of the identity untouched; a
    replace_name of None matches any name.
    """

    __slots__ = ()

    def to_line(self):
        """
        Render this entry in mailmap file syntax.
        """
        parts = []
        if self.real_name is not None:
            parts.append(self.real_name)
        if self.real_email is None and self.replace_name is None:
            parts.append("<%s>" % self.replace_email)
            return " ".join(parts)
        parts.append("<%s>" % (self.real_email or ""))
        if self.replace_name is not None:
            parts.append(self.replace_name)
        parts.append("<%s>" % self.replace_email)
        return " ".join(parts)


def _decode(buffer):
    if isinstance(buffer, str):
        return buffer
    try:
        return bytes(buffer).decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(_("Mailmap is not valid UTF-8 text: %s") % e)


def _parse_line(line):
    """
    Parse a single mailmap line; return None for comments, blank lines and
    lines that cannot be understood.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    m = _name_and_email_re.match(line)
    if not m:
        return None
    proper_name, proper_email = (x.strip() for x in m.groups())

    rest = line[m.end() :].strip()
    if rest.startswith("#"):
        rest = ""
    m = _name_and_email_re.match(rest)
    if m:
        commit_name, commit_email = (x.strip() for x in m.groups())
        if not commit_email:
            return None
        return MailmapEntry(
            proper_name or None, proper_email or None, commit_name or None, commit_email
        )
    if "<" in rest:
        # A second email was started but never closed
        return None

    if not proper_email:
        return None
    return MailmapEntry(proper_name or None, None, None, proper_email)


def parse_mailmap(buffer):
    """
    Parse the contents of a mailmap file into a list of MailmapEntry, in file
    order.  Lines that cannot be parsed are skipped; only a buffer that is not
    text at all raises ParseError.
    """
    entries = []
    for count, line in enumerate(_decode(buffer).split("\n"), 1):
        entry = _parse_line(line)
        if entry is not None:
            entries.append(entry)
        elif line.strip() and not line.strip().startswith("#"):
            logger.debug("Skipping unparseable mailmap line #%d: %r", count, line)
    return entries


def _check_field(value, what, optional=True):
    if value is None:
        if optional:
            return None
        raise InvalidArgument(_("%s is required") % what)
    if not isinstance(value, str):
        raise InvalidArgument(
            _("%s must be a string, not %s") % (what, type(value).__name__)
        )
    if "\0" in value:
        raise InvalidArgument(_("%s contains a NUL character") % what)
    return value


class Mailmap(object):
    """
    A mapping from the names and emails recorded in history to the real
    names and emails of the people behind them.

    Entries are indexed by their lower-cased replace_email.  At most one entry
    exists per (replace_email, replace_name) pair; adding another one for the
    same pair replaces the earlier entry in place.

    A Mailmap does no locking.  It may be shared between threads only as long
    as nobody adds entries while others resolve.
    """

    def __init__(self, entries=None):
        # (normalized replace_email, replace_name) -> entry, in store order
        self._entries = {}

        # normalized replace_email -> {replace_name: entry}
        self._by_email = {}

        for entry in entries or ():
            self.add(entry)

    @classmethod
    def from_buffer(cls, buffer):
        return cls(parse_mailmap(buffer))

    @classmethod
    def from_path(cls, path):
        try:
            with open(path, "rb") as f:
                contents = f.read()
        except OSError as e:
            raise RepositoryAccessError(_("Cannot read %s: %s") % (path, e))
        return cls.from_buffer(contents)

    @classmethod
    def from_repository(cls, repo):
        """
        Build a mailmap from the sources configured for repo: the working
        tree's .mailmap, then mailmap.blob, then mailmap.file.
        """
        from .loader import MailmapLoader

        return MailmapLoader(cls()).add_repository(repo).mailmap

    def add_entry(
        self, real_name=None, real_email=None, replace_name=None, replace_email=None
    ):
        """
        Add a rule, replacing any existing rule for the same replace_name and
        replace_email.
        """
        replace_email = _check_field(replace_email, "replace_email", optional=False)
        if not replace_email:
            raise InvalidArgument(_("replace_email cannot be empty"))
        entry = MailmapEntry(
            _check_field(real_name, "real_name"),
            _check_field(real_email, "real_email"),
            _check_field(replace_name, "replace_name"),
            replace_email,
        )
        key = replace_email.lower()
        self._entries[(key, entry.replace_name)] = entry
        self._by_email.setdefault(key, {})[entry.replace_name] = entry

    def add(self, entry):
        self.add_entry(*entry)

    def add_buffer(self, buffer):
        """
        Parse buffer and add its entries on top of the existing ones.  Returns
        the number of entries read.
        """
        entries = parse_mailmap(buffer)
        for entry in entries:
            self.add(entry)
        return len(entries)

    def find(self, name, email):
        """
        Return the entry that applies to name and email, or None.  An entry
        naming this exact replace_name wins over one that matches any name.
        """
        candidates = self._by_email.get(email.lower())
        if not candidates:
            return None
        if name is not None and name in candidates:
            return candidates[name]
        return candidates.get(None)

    def resolve(self, name, email):
        """
        Return the real (name, email) for the given pair.  Fields the matching
        entry does not specify, and both fields when nothing matches, are
        returned as they were passed in.
        """
        entry = self.find(name, email)
        if entry is None:
            return name, email
        if entry.real_name is not None:
            name = entry.real_name
        if entry.real_email is not None:
            email = entry.real_email
        return name, email

    def resolve_signature(self, signature):
        """
        Return a new Signature carrying the real name and email, with the
        time and offset of the given one.
        """
        name, email = self.resolve(signature.name, signature.email)
        return Signature(name, email, signature.time, signature.offset)

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries.values()))

    def __repr__(self):
        return "%s(%d entries)" % (type(self).__name__, len(self))
