"""
Assembling a Mailmap from the places git looks for one.

The repository itself is reached through a collaborator object, which must
provide:

  read_worktree_mailmap()  contents of .mailmap at the top of the working
                           tree, or None
  has_worktree()           whether the repository has a working tree
  get_config(key)          value of a configuration key, or None when unset
  read_blob(spec)          contents of the blob named by spec (for example
                           'HEAD:.mailmap'), or None if there is no such blob
  read_file(path)          contents of the file at path, or None if it does
                           not exist or cannot be read

The collaborator raises RepositoryAccessError when the repository cannot be
read at all; OSError and CalledProcessError escaping it are reported the same
way.  GitRepository in gitutils is the implementation backed by git itself.
"""
import logging
import os
import subprocess

from .errors import ParseError, RepositoryAccessError
from .gettext import _
from .mailmap import Mailmap

logger = logging.getLogger(__name__)

DEFAULT_BARE_BLOB = "HEAD:.mailmap"


class MailmapLoader(object):
    """
    Layers mailmap sources on top of each other.  Every add_* method parses
    one source and adds its entries, in file order, to self.mailmap, so that
    a later source replaces what an earlier one said about the same identity.
    """

    def __init__(self, mailmap=None):
        self.mailmap = mailmap if mailmap is not None else Mailmap()

    @staticmethod
    def _call(func, *args):
        try:
            return func(*args)
        except RepositoryAccessError:
            raise
        except (OSError, subprocess.CalledProcessError) as e:
            raise RepositoryAccessError(_("Cannot read repository: %s") % e)

    def add_buffer(self, buffer, source="buffer"):
        count = self.mailmap.add_buffer(buffer)
        logger.debug("Read %d mailmap entries from %s", count, source)
        return self

    def _add_source(self, contents, source):
        # An undecodable repository source is skipped like a missing one
        try:
            return self.add_buffer(contents, source)
        except ParseError as e:
            logger.debug("Skipping mailmap source %s: %s", source, e)
            return self

    def add_path(self, path):
        """
        Add the mailmap file at path; a file that does not exist is skipped.
        """
        try:
            with open(path, "rb") as f:
                contents = f.read()
        except FileNotFoundError:
            logger.debug("Skipping missing mailmap file %s", path)
            return self
        except OSError as e:
            raise RepositoryAccessError(_("Cannot read %s: %s") % (path, e))
        return self.add_buffer(contents, os.fsdecode(path))

    def add_blob(self, repo, spec):
        contents = self._call(repo.read_blob, spec)
        if contents is None:
            logger.debug("Skipping missing mailmap blob %s", spec)
            return self
        return self._add_source(contents, spec)

    def add_file(self, repo, path):
        contents = self._call(repo.read_file, path)
        if contents is None:
            logger.debug("Skipping unreadable mailmap file %s", path)
            return self
        return self._add_source(contents, path)

    def add_repository(self, repo):
        """
        Add, in order: the working tree's .mailmap, the blob named by
        mailmap.blob (HEAD:.mailmap by default in a bare repository) and the
        file named by mailmap.file.
        """
        contents = self._call(repo.read_worktree_mailmap)
        if contents is not None:
            self._add_source(contents, ".mailmap")

        blob = self._call(repo.get_config, "mailmap.blob")
        if blob is None and not self._call(repo.has_worktree):
            blob = DEFAULT_BARE_BLOB
        if blob:
            self.add_blob(repo, blob)

        path = self._call(repo.get_config, "mailmap.file")
        if path:
            self.add_file(repo, path)
        return self
