"""Exceptions raised before the packaging pipeline starts mutating anything.

Step-level failures (copy, archive, cleanup) are not exceptions; they are
recorded as StepResult entries and folded into PackageResult.is_success.
"""

from pathlib import Path


class RelpackError(Exception):
    """Base class for fatal relpack errors (exit code 1)."""


class UsageError(RelpackError):
    """Raised for bad or missing command line arguments."""


class PreconditionError(RelpackError):
    """Raised when the filesystem is not in a state packaging can start from.

    Carries the offending path for reporting.
    """

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(message)


class HelpRequested(Exception):
    """Signal from the dispatcher that -h/--help was given."""


class VersionRequested(Exception):
    """Signal from the dispatcher that -V/--version was given."""
