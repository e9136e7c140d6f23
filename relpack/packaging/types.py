"""Types for the packaging pipeline.

RunConfig is the immutable description of one invocation.
StepResult and PackageResult capture what the pipeline did with it.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Optional


class FormatTag(StrEnum):
    """Archive kinds a release can be emitted as."""

    TGZ = "tgz"
    TBZ = "tbz"
    ZIP = "zip"


# Output extension per format. Keyed by every FormatTag member.
FORMAT_EXTENSIONS: dict[FormatTag, str] = {
    FormatTag.TGZ: "tar.gz",
    FormatTag.TBZ: "tar.bz2",
    FormatTag.ZIP: "zip",
}


def artifact_name(staged_name: str, fmt: FormatTag) -> str:
    """Return the artifact filename for a staged tree name and format."""
    return f"{staged_name}.{FORMAT_EXTENSIONS[fmt]}"


@dataclass(frozen=True)
class RunConfig:
    """Everything the dispatcher learned from the command line.

    Built once, never mutated. formats may contain duplicates; each
    occurrence re-archives (and overwrites) the same artifact.
    """

    project_path: str
    release_version: str
    formats: tuple[FormatTag, ...] = ()
    exclusions: tuple[str, ...] = ()
    verbose: bool = False


@dataclass
class StepResult:
    """Result of a single pipeline step (stage, archive, cleanup).

    A step never raises; failures are recorded in `error`.
    """

    name: str
    target: str
    is_success: bool
    duration_seconds: float = 0.0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "target": self.target,
            "is_success": self.is_success,
            "duration_seconds": round(self.duration_seconds, 3),
            "error": self.error,
        }


@dataclass
class PackageResult:
    """Aggregated outcome of package_project.

    is_success is the AND of the copy, every archive step and cleanup.
    Artifacts from successful archive steps are listed even when another
    step failed; nothing is rolled back.
    """

    staged_dir: Path
    exclusions: tuple[str, ...] = ()
    steps: list[StepResult] = field(default_factory=list)
    artifacts: list[Path] = field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return all(step.is_success for step in self.steps)

    @property
    def failed_steps(self) -> list[StepResult]:
        return [step for step in self.steps if not step.is_success]

    def to_dict(self) -> dict:
        return {
            "staged_dir": str(self.staged_dir),
            "exclusions": list(self.exclusions),
            "steps": [s.to_dict() for s in self.steps],
            "artifacts": [str(a) for a in self.artifacts],
            "is_success": self.is_success,
            "total_duration_seconds": round(
                sum(s.duration_seconds for s in self.steps), 3
            ),
        }
