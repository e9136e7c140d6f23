"""Packaging module: stage a project tree and emit release archives.

Public API:
    package_project(project_path, release_version, formats, exclusions) -> PackageResult
    package_from_config(config) -> PackageResult
"""

from relpack.packaging.pipeline import package_from_config, package_project
from relpack.packaging.types import FormatTag, PackageResult, RunConfig, StepResult

__all__ = [
    "package_project",
    "package_from_config",
    "FormatTag",
    "PackageResult",
    "RunConfig",
    "StepResult",
]
