import argparse
import os

from .gettext import _


class MailmapOptions(object):
    @staticmethod
    def create_arg_parser():
        # Include usage in the summary, so we can put the description first
        summary = _(
            """Show canonical names and email addresses for contacts

    git-mailmap maps each contact given on the command line (or on standard
    input with --stdin) to its canonical name and email, according to the
    mailmap files of a repository or the files given explicitly.

    Basic Usage:
      git-mailmap [OPTIONS] "Name <user@host>"...
      git-mailmap [OPTIONS] "<user@host>"...
      git-mailmap [OPTIONS] --signatures "Name <user@host> 1700000000 +0100"...
      git-mailmap [OPTIONS] --list
    """
        ).rstrip()

        example_text = _(
            """SOURCES

    Unless told otherwise, mailmap entries are read from the repository in the
    current directory, in this order, later entries overriding earlier ones:
      1. .mailmap at the top of the working tree
      2. the blob named by the mailmap.blob configuration variable
         (HEAD:.mailmap in a bare repository)
      3. the file named by the mailmap.file configuration variable
    Any --mailmap-blob and --mailmap-file given are read after those.  If
    --mailmap-file or --mailmap-blob is used without --repo, only the sources
    given on the command line are read.

EXAMPLES

    To see who the repository thinks wrote as jd@old.example.com:
      git-mailmap "<jd@old.example.com>"

    To canonicalize every author of the current branch:
      git log --format='%an <%ae>' | sort -u | git-mailmap --stdin

    To check a mailmap file before committing it:
      git-mailmap --mailmap-file .mailmap.new --list"""
        )

        parser = argparse.ArgumentParser(
            prog="git-mailmap",
            description=summary,
            usage=argparse.SUPPRESS,
            add_help=False,
            epilog=example_text,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        sources = parser.add_argument_group(title=_("Mailmap sources"))
        sources.add_argument(
            "--repo",
            metavar="DIRECTORY",
            type=os.fsencode,
            help=_(
                "Read the mailmap sources configured for the git repository "
                "in DIRECTORY.  Defaults to the current directory unless "
                "--mailmap-file or --mailmap-blob is given."
            ),
        )
        sources.add_argument(
            "--mailmap-file",
            dest="mailmap_files",
            metavar="FILENAME",
            action="append",
            default=[],
            type=os.fsencode,
            help=_(
                "Also read mailmap entries from FILENAME.  May be given "
                "multiple times; later files override earlier ones."
            ),
        )
        sources.add_argument(
            "--mailmap-blob",
            dest="mailmap_blobs",
            metavar="BLOB",
            action="append",
            default=[],
            help=_(
                "Also read mailmap entries from BLOB in the repository, for "
                "example 'HEAD:.mailmap'.  May be given multiple times."
            ),
        )

        inputs = parser.add_argument_group(title=_("Input and output"))
        inputs.add_argument(
            "--stdin",
            action="store_true",
            help=_(
                "Read contacts, one per line, from standard input after "
                "those given on the command line."
            ),
        )
        inputs.add_argument(
            "--signatures",
            action="store_true",
            help=_(
                "Treat each contact as a full signature with timestamp and "
                "timezone offset ('Name <email> 1700000000 +0100'), as found "
                "in author and committer headers."
            ),
        )
        inputs.add_argument(
            "--list",
            action="store_true",
            help=_("Print the merged mailmap entries instead of resolving contacts."),
        )
        inputs.add_argument(
            "contacts",
            metavar="CONTACT",
            nargs="*",
            help=_("A contact of the form 'Name <user@host>' or '<user@host>'."),
        )

        misc = parser.add_argument_group(title=_("Miscellaneous options"))
        misc.add_argument(
            "--help",
            "-h",
            action="store_true",
            help=_("Show this help message and exit."),
        )
        misc.add_argument(
            "--debug",
            action="store_true",
            help=_("Report which sources were read and which lines were skipped."),
        )
        return parser

    @staticmethod
    def sanity_check_args(args):
        if args.list and (args.contacts or args.stdin):
            raise SystemExit(_("Error: --list does not take any contacts."))
        if args.list and args.signatures:
            raise SystemExit(_("Error: --list is incompatible with --signatures."))
        if not (args.list or args.contacts or args.stdin):
            raise SystemExit(_("Error: no contacts specified."))

    @staticmethod
    def parse_args(input_args):
        parser = MailmapOptions.create_arg_parser()
        if not input_args:
            parser.print_usage()
            raise SystemExit(_("No arguments specified."))
        args = parser.parse_args(input_args)
        if args.help:
            parser.print_help()
            raise SystemExit()
        MailmapOptions.sanity_check_args(args)
        if args.repo is None and not (args.mailmap_files or args.mailmap_blobs):
            args.repo = b"."
        return args
