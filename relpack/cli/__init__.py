"""Command line layer.

Public API:
    normalize_args(argv) -> list[str]
    parse_args(tokens) -> RunConfig
    main(argv) -> int
"""

from relpack.cli.dispatcher import parse_args
from relpack.cli.main import main
from relpack.cli.normalizer import normalize_args

__all__ = ["main", "normalize_args", "parse_args"]
