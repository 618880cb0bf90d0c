import os
import subprocess

from .errors import RepositoryAccessError
from .gettext import _


class GitRepository(object):
    """
    Reads mailmap sources out of a git repository by running git.  This is
    the collaborator MailmapLoader.add_repository expects.
    """

    def __init__(self, path="."):
        self.path = os.fsdecode(path)
        self._bare = None
        self._toplevel = None

    def _git(self, *args):
        try:
            return subprocess.check_output(
                ["git"] + list(args), cwd=self.path, stderr=subprocess.PIPE
            )
        except OSError as e:
            raise RepositoryAccessError(_("Cannot run git: %s") % e)

    def _fatal(self, e):
        message = e.stderr.decode("utf-8", "replace").strip() if e.stderr else e
        return RepositoryAccessError(_("fatal: %s") % message)

    @staticmethod
    def _read(path):
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError:
            return None

    def is_bare(self):
        if self._bare is None:
            try:
                out = self._git("rev-parse", "--is-bare-repository")
            except subprocess.CalledProcessError:
                raise RepositoryAccessError(
                    _("%s does not appear to be a valid git repository") % self.path
                )
            self._bare = out.strip() == b"true"
        return self._bare

    def has_worktree(self):
        return not self.is_bare()

    def toplevel(self):
        """
        Return the root of the working tree.
        """
        if self._toplevel is None:
            try:
                out = self._git("rev-parse", "--show-toplevel")
            except subprocess.CalledProcessError as e:
                raise self._fatal(e)
            self._toplevel = os.fsdecode(out.rstrip(b"\n"))
        return self._toplevel

    def read_worktree_mailmap(self):
        if not self.has_worktree():
            return None
        return self._read(os.path.join(self.toplevel(), ".mailmap"))

    def get_config(self, key):
        try:
            out = self._git("config", "--get", key)
        except subprocess.CalledProcessError as e:
            # Exit status 1 just means the key is not set
            if e.returncode == 1:
                return None
            raise self._fatal(e)
        return out.decode("utf-8").rstrip("\n")

    def read_blob(self, spec):
        try:
            sha = self._git("rev-parse", "--verify", "--quiet", spec)
        except subprocess.CalledProcessError as e:
            # --quiet exits with 1 and prints nothing when spec names nothing
            if e.returncode == 1:
                return None
            raise self._fatal(e)
        sha = sha.strip().decode()
        try:
            if self._git("cat-file", "-t", sha).strip() != b"blob":
                return None
            return self._git("cat-file", "blob", sha)
        except subprocess.CalledProcessError as e:
            raise self._fatal(e)

    def read_file(self, path):
        path = os.path.expanduser(path)
        if not os.path.isabs(path):
            base = self.toplevel() if self.has_worktree() else self.path
            path = os.path.join(base, path)
        return self._read(path)
