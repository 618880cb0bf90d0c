import gettext
import os


def gettext_poison(msg):
    if "GIT_TEST_GETTEXT_POISON" in os.environ:
        return "# GETTEXT POISON #"
    return gettext.gettext(msg)


_ = gettext_poison


def setup_gettext():
    TEXTDOMAIN = "git-mailmap"
    podir = os.environ.get("GIT_TEXTDOMAINDIR")
    if not podir or not os.path.isdir(podir):
        podir = None  # Python has its own fallback; use that

    gettext.textdomain(TEXTDOMAIN)
    gettext.bindtextdomain(TEXTDOMAIN, podir)
