"""Console interface for git-mailmap."""
import logging
import re
import sys

from .errors import MailmapError, ParseError
from .gettext import _, setup_gettext
from .gitutils import GitRepository
from .loader import MailmapLoader
from .options import MailmapOptions
from .signature import Signature

_contact_re = re.compile(r"^([^<>]*)<([^<>]*)>$")


def parse_contact(contact):
    """
    Split 'Name <email>' or '<email>' into (name, email); name is None when
    the contact has none.
    """
    m = _contact_re.match(contact.strip())
    if not m:
        raise ParseError(_("unable to parse contact: %s") % contact)
    name, email = m.group(1).strip(), m.group(2).strip()
    return name or None, email


def format_contact(name, email):
    if name:
        return "%s <%s>" % (name, email)
    return "<%s>" % email


def load_mailmap(args):
    loader = MailmapLoader()
    repo = None
    if args.repo is not None:
        repo = GitRepository(args.repo)
        loader.add_repository(repo)
    for filename in args.mailmap_files:
        loader.add_path(filename)
    for blob in args.mailmap_blobs:
        loader.add_blob(repo or GitRepository("."), blob)
    return loader.mailmap


def iter_inputs(args, stdin):
    for contact in args.contacts:
        yield contact
    if args.stdin:
        for line in stdin:
            line = line.rstrip("\r\n")
            if line.strip():
                yield line


def run(args, stdin=None, stdout=None):
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout

    mailmap = load_mailmap(args)
    if args.list:
        for entry in mailmap:
            stdout.write(entry.to_line() + "\n")
        return

    for contact in iter_inputs(args, stdin):
        if args.signatures:
            signature = Signature.from_bytes(contact)
            stdout.write("%s\n" % mailmap.resolve_signature(signature))
        else:
            name, email = mailmap.resolve(*parse_contact(contact))
            stdout.write(format_contact(name, email) + "\n")
        stdout.flush()


def main(argv=None):
    setup_gettext()
    args = MailmapOptions.parse_args(sys.argv[1:] if argv is None else argv)
    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr
        )
    try:
        run(args)
    except MailmapError as e:
        raise SystemExit(_("fatal: %s") % e)
