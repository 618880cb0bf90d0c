class MailmapError(Exception):
    """
    The base class for all errors raised by git-mailmap.
    """


class ParseError(MailmapError):
    """
    Raised when input cannot be read as mailmap text or as a signature.
    Individual malformed mailmap lines never raise this; they are skipped.
    """


class InvalidArgument(MailmapError, ValueError):
    """
    Raised when an entry is added with an empty or malformed field.
    """


class RepositoryAccessError(MailmapError):
    """
    Raised when the repository (or the filesystem behind it) cannot be read.
    A mailmap source that simply does not exist is not an error.
    """


class InvalidSignature(MailmapError, ValueError):
    """
    Raised when a name and email cannot be assembled into a signature.
    """
