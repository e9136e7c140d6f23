"""Argument normalizer — rewrites argv into one token per option/value.

    -abc            -> -a -b -c
    --format=zip    -> --format zip
    --exclude=a=b   -> --exclude a=b   (split at the first "=")

Everything else (single-character options, long options without "=",
positionals, "-", "--" and "") passes through unchanged; the dispatcher
decides what those mean.
"""

from typing import Iterable


def normalize_args(argv: Iterable[str]) -> list[str]:
    """Return the normalized token list for argv. Pure."""
    tokens: list[str] = []
    for arg in argv:
        if arg.startswith("--"):
            if "=" in arg:
                name, value = arg.split("=", 1)
                tokens.extend((name, value))
            else:
                tokens.append(arg)
        elif arg.startswith("-") and len(arg) > 2:
            tokens.extend(f"-{char}" for char in arg[1:])
        else:
            tokens.append(arg)
    return tokens
