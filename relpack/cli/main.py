"""Command line entry point.

    relpack [options] <project> <version>

Exit codes:
    0  artifacts written, or help/version shown
    1  usage error, precondition error, or any failed pipeline step
"""

import sys
from typing import Optional, Sequence

from relpack.cli.dispatcher import parse_args
from relpack.cli.normalizer import normalize_args
from relpack.cli.usage import PROG, USAGE, version_banner
from relpack.core.logging import configure_logging, get_logger
from relpack.errors import HelpRequested, PreconditionError, UsageError, VersionRequested
from relpack.packaging.pipeline import package_from_config

EXIT_OK = 0
EXIT_FAILURE = 1

log = get_logger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one packaging invocation and return the process exit code."""
    argv = list(sys.argv[1:] if argv is None else argv)

    if not argv:
        sys.stderr.write(USAGE)
        return EXIT_FAILURE

    try:
        config = parse_args(normalize_args(argv))
    except HelpRequested:
        sys.stdout.write(USAGE)
        return EXIT_OK
    except VersionRequested:
        print(version_banner())
        return EXIT_OK
    except UsageError as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        print(f"Try '{PROG} --help' for more information.", file=sys.stderr)
        return EXIT_FAILURE

    configure_logging(verbose=config.verbose)

    try:
        result = package_from_config(config)
    except PreconditionError as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    for step in result.failed_steps:
        log.debug("step failed", step=step.name, target=step.target, error=step.error)

    for artifact in result.artifacts:
        print(artifact.name)

    return EXIT_OK if result.is_success else EXIT_FAILURE


def run() -> None:
    """Entry-point for console scripts."""
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    run()
