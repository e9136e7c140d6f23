"""Option dispatcher — turns normalized tokens into a RunConfig.

Consumes tokens left to right. Options that take a value consume the
next token whatever it looks like, so `-x -v` excludes "-v". Options and
positionals may be interleaved; exactly two positionals (project,
release) must be present once every token is consumed.

Never touches the filesystem: every UsageError is raised before any
packaging work starts.
"""

from enum import StrEnum
from typing import Iterable

from relpack.errors import HelpRequested, UsageError, VersionRequested
from relpack.packaging.types import FormatTag, RunConfig

END_OF_OPTIONS = "--"


class Option(StrEnum):
    FORMAT = "format"
    EXCLUDE = "exclude"
    VERBOSE = "verbose"
    HELP = "help"
    VERSION = "version"


OPTIONS: dict[str, Option] = {
    "-f": Option.FORMAT,
    "--format": Option.FORMAT,
    "-x": Option.EXCLUDE,
    "--exclude": Option.EXCLUDE,
    "-v": Option.VERBOSE,
    "--verbose": Option.VERBOSE,
    "-h": Option.HELP,
    "--help": Option.HELP,
    "-V": Option.VERSION,
    "--version": Option.VERSION,
}

# Options that consume the following token as their value
VALUE_OPTIONS = {Option.FORMAT, Option.EXCLUDE}

POSITIONAL_COUNT = 2


def parse_format(value: str) -> FormatTag:
    """Return the FormatTag for value or raise UsageError naming it."""
    try:
        return FormatTag(value)
    except ValueError:
        choices = ", ".join(tag.value for tag in FormatTag)
        raise UsageError(f"Unknown format '{value}' (expected one of: {choices})") from None


def parse_args(tokens: Iterable[str]) -> RunConfig:
    """Build a RunConfig from normalized tokens.

    Raises:
        UsageError: On any bad, missing or unknown argument.
        HelpRequested: When -h/--help is seen.
        VersionRequested: When -V/--version is seen.
    """
    tokens = list(tokens)
    if not tokens:
        raise UsageError("No arguments given")

    formats: list[FormatTag] = []
    exclusions: list[str] = []
    positionals: list[str] = []
    verbose = False
    options_done = False

    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1

        if not options_done and token == END_OF_OPTIONS:
            options_done = True
            continue

        if options_done or not token.startswith("-"):
            _add_positional(positionals, token)
            continue

        option = OPTIONS.get(token)
        if option is None:
            raise UsageError(f"Unknown option '{token}'")

        value = ""
        if option in VALUE_OPTIONS:
            if index >= len(tokens):
                raise UsageError(f"Option '{token}' requires an argument")
            value = tokens[index]
            index += 1

        if option is Option.FORMAT:
            formats.append(parse_format(value))
        elif option is Option.EXCLUDE:
            exclusions.append(value)
        elif option is Option.VERBOSE:
            verbose = True
        elif option is Option.HELP:
            raise HelpRequested()
        elif option is Option.VERSION:
            raise VersionRequested()

    if len(positionals) != POSITIONAL_COUNT:
        raise UsageError(
            f"Expected <project> and <version>, got {len(positionals)} positional argument(s)"
        )

    project_path, release_version = positionals
    return RunConfig(
        project_path=project_path,
        release_version=release_version,
        formats=tuple(formats),
        exclusions=tuple(exclusions),
        verbose=verbose,
    )


def _add_positional(positionals: list[str], token: str) -> None:
    if not token:
        raise UsageError("Empty argument")
    if len(positionals) == POSITIONAL_COUNT:
        raise UsageError(f"Unexpected extra argument '{token}'")
    positionals.append(token)
