from datetime import datetime, timedelta, tzinfo
import re

from .errors import InvalidSignature, ParseError
from .gettext import _


# Characters git refuses inside the name or email of a signature
_FORBIDDEN_CHARS = ("<", ">", "\n", "\0")


def parse_offset(offset_string):
    """
    Convert a '+hhmm' / '-hhmm' offset into minutes east of UTC.
    """
    matches = FixedTimeZone.tz_re.match(offset_string)
    if not matches:
        raise ParseError(_("Invalid timezone offset: %s") % offset_string)
    sign, hh, mm = matches.groups()
    factor = -1 if sign == "-" else 1
    return factor * (60 * int(hh) + int(mm))


def format_offset(offset):
    sign = "-" if offset < 0 else "+"
    hours, minutes = divmod(abs(offset), 60)
    return "%s%02d%02d" % (sign, hours, minutes)


class FixedTimeZone(tzinfo):
    """
    Fixed offset in minutes east from UTC.
    """

    tz_re = re.compile(r"^([-+]?)(\d\d)(\d\d)$")

    def __init__(self, offset):
        tzinfo.__init__(self)
        self._offset = timedelta(minutes=offset)
        self._offset_string = format_offset(offset)

    def utcoffset(self, dt):
        return self._offset

    def tzname(self, dt):
        return self._offset_string

    def dst(self, dt):
        return timedelta(0)


def _check_identity_part(value, what):
    if not isinstance(value, str):
        raise InvalidSignature(
            _("Signature %s must be a string, not %s") % (what, type(value).__name__)
        )
    value = value.strip()
    if not value:
        raise InvalidSignature(_("Signature cannot have an empty %s") % what)
    for char in _FORBIDDEN_CHARS:
        if char in value:
            raise InvalidSignature(
                _("Signature %s contains a forbidden character: %r") % (what, value)
            )
    return value


class Signature(object):
    """
    An identity (name and email) together with the moment it acted: a unix
    timestamp and the offset, in minutes, of the local timezone from UTC.
    This is what git records in the author, committer and tagger headers.
    """

    # Same layout as the author/committer lines of a fast-export stream
    user_re = re.compile(r"^(.*?) ?<(.*?)> (-?\d+) ([-+]?\d{4})$")

    def __init__(self, name, email, time, offset=0):
        self.name = _check_identity_part(name, "name")
        self.email = _check_identity_part(email, "email")
        self.time = int(time)
        self.offset = int(offset)

    @classmethod
    def from_bytes(cls, line):
        """
        Parse a signature of the form 'Name <email> 1700000000 +0100'.
        """
        if isinstance(line, bytes):
            try:
                line = line.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseError(_("Signature is not valid UTF-8: %s") % e)
        line = line.rstrip("\r\n")
        matches = cls.user_re.match(line)
        if not matches:
            raise ParseError(_("Unparseable signature: %s") % line)
        name, email, time, offset = matches.groups()
        return cls(name, email, int(time), parse_offset(offset))

    @classmethod
    def from_datetime(cls, name, email, when):
        """
        Build a signature from a timezone-aware datetime.
        """
        offset = when.utcoffset()
        if offset is None:
            raise InvalidSignature(_("Signature time must be timezone aware"))
        return cls(name, email, int(when.timestamp()), offset.total_seconds() // 60)

    @property
    def when(self):
        return datetime.fromtimestamp(self.time, FixedTimeZone(self.offset))

    def replace(self, name=None, email=None):
        """
        Return a copy with a different identity but the same time and offset.
        """
        return Signature(
            self.name if name is None else name,
            self.email if email is None else email,
            self.time,
            self.offset,
        )

    def __bytes__(self):
        return str(self).encode("utf-8")

    def __str__(self):
        return "%s <%s> %d %s" % (
            self.name,
            self.email,
            self.time,
            format_offset(self.offset),
        )

    def __repr__(self):
        return "Signature(%r, %r, %d, %d)" % (
            self.name,
            self.email,
            self.time,
            self.offset,
        )

    def __eq__(self, other):
        if not isinstance(other, Signature):
            return NotImplemented
        return (self.name, self.email, self.time, self.offset) == (
            other.name,
            other.email,
            other.time,
            other.offset,
        )

    def __hash__(self):
        return hash((self.name, self.email, self.time, self.offset))
