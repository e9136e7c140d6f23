"""Fixed help and version text."""

from relpack import __version__

PROG = "relpack"

USAGE = f"""\
Usage: {PROG} [options] <project> <version>

Package <project> as <project>-<version> release archives in the
current directory. Version control metadata (.git, .svn) is excluded
automatically.

Options:
  -f, --format <tgz|tbz|zip>   archive format; may repeat, one artifact each
  -x, --exclude <pattern>      leave matching entries out; may repeat
  -v, --verbose                list every staged and archived entry
  -h, --help                   show this help and exit
  -V, --version                show the version and exit
"""


def version_banner() -> str:
    return f"{PROG} {__version__}"
