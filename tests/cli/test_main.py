"""End-to-end tests for the relpack command line.

main() is called in-process from inside a temporary working directory;
artifacts are inspected on disk.
"""

import tarfile
import zipfile
from unittest.mock import patch

import pytest

from relpack import __version__
from relpack.cli.main import main
from relpack.packaging.types import PackageResult, StepResult


def _zip_names(path):
    with zipfile.ZipFile(path) as archive:
        return {name.rstrip("/") for name in archive.namelist()}


class TestInformational:
    def test_no_arguments_prints_usage_and_fails(self, capsys):
        assert main([]) == 1
        assert "Usage: relpack" in capsys.readouterr().err

    @pytest.mark.parametrize("argv", [["-h"], ["--help"], ["-vh"], ["myapp", "1.0", "--help"]])
    def test_help(self, argv, capsys):
        assert main(argv) == 0
        assert "Usage: relpack" in capsys.readouterr().out

    @pytest.mark.parametrize("flag", ["-V", "--version"])
    def test_version(self, flag, capsys):
        assert main([flag]) == 0
        assert capsys.readouterr().out.strip() == f"relpack {__version__}"


class TestUsageErrors:
    def test_bad_format_before_any_mutation(self, plain_project, workdir, capsys):
        assert main(["-f", "rar", str(plain_project), "1.0"]) == 1

        err = capsys.readouterr().err
        assert "'rar'" in err
        assert list(workdir.iterdir()) == []

    def test_bad_format_with_equals_form(self, capsys):
        assert main(["--format=7z", "p", "1"]) == 1
        assert "'7z'" in capsys.readouterr().err

    def test_unknown_option(self, capsys):
        assert main(["--frobnicate", "p", "1"]) == 1
        assert "'--frobnicate'" in capsys.readouterr().err

    def test_no_positionals(self, workdir, capsys):
        assert main(["-v", "-f", "zip"]) == 1
        assert list(workdir.iterdir()) == []

    def test_too_many_positionals(self, capsys):
        assert main(["a", "b", "c"]) == 1
        assert "extra argument 'c'" in capsys.readouterr().err


class TestPackaging:
    def test_git_project_tgz_and_zip(self, git_project, workdir, capsys):
        assert main(["-f", "tgz", "-f", "zip", str(git_project), "1.2.3"]) == 0

        assert sorted(p.name for p in workdir.iterdir()) == [
            "myapp-1.2.3.tar.gz", "myapp-1.2.3.zip",
        ]
        with tarfile.open(workdir / "myapp-1.2.3.tar.gz") as archive:
            tar_names = set(archive.getnames())
        zip_names = _zip_names(workdir / "myapp-1.2.3.zip")
        for names in (tar_names, zip_names):
            assert "myapp-1.2.3/README" in names
            assert not any(".git" in name for name in names)

        out = capsys.readouterr().out.split()
        assert out == ["myapp-1.2.3.tar.gz", "myapp-1.2.3.zip"]

    def test_relative_project_path(self, plain_project, workdir, monkeypatch):
        monkeypatch.chdir(plain_project.parent)

        assert main(["-f", "zip", "myapp", "1.0"]) == 0
        assert (plain_project.parent / "myapp-1.0.zip").is_file()

    def test_run_from_inside_project(self, plain_project, monkeypatch, capsys):
        monkeypatch.chdir(plain_project)

        assert main(["-f", "zip", ".", "1.0"]) == 0

        assert (plain_project / "myapp-1.0.zip").is_file()
        assert not (plain_project / "-1.0.zip").exists()
        assert not (plain_project / "myapp-1.0").exists()
        assert "myapp-1.0/README" in _zip_names(plain_project / "myapp-1.0.zip")
        assert capsys.readouterr().out.split() == ["myapp-1.0.zip"]

    def test_exclusions_with_trailing_options(self, plain_project, workdir):
        argv = ["-x", "build", "-x", "dist", str(plain_project), "2.0", "-f", "zip"]

        assert main(argv) == 0

        names = _zip_names(workdir / "myapp-2.0.zip")
        assert "myapp-2.0/README" in names
        assert "myapp-2.0/src/app.py" in names
        assert not any(n.endswith("/build") or "/build/" in n for n in names)
        assert not any(n.endswith("/dist") or "/dist/" in n for n in names)

    def test_combined_flags_and_long_equals(self, plain_project, workdir):
        assert main(["-vf", "tbz", "--exclude=dist", str(plain_project), "1.0"]) == 0
        with tarfile.open(workdir / "myapp-1.0.tar.bz2") as archive:
            names = archive.getnames()
        assert "myapp-1.0/dist" not in names

    def test_staged_dir_collision(self, plain_project, workdir, capsys):
        (workdir / "myapp-1.0").mkdir()
        (workdir / "myapp-1.0" / "keep").write_text("x")

        assert main(["-f", "zip", str(plain_project), "1.0"]) == 1

        assert "already exists" in capsys.readouterr().err
        assert (workdir / "myapp-1.0" / "keep").read_text() == "x"
        assert not (workdir / "myapp-1.0.zip").exists()

    def test_missing_project(self, src_root, workdir, capsys):
        assert main(["-f", "zip", str(src_root / "ghost"), "1.0"]) == 1
        assert "does not exist" in capsys.readouterr().err

    def test_failed_step_sets_exit_code(self, plain_project, workdir, capsys):
        failed = PackageResult(
            staged_dir=workdir / "myapp-1.0",
            steps=[
                StepResult(name="stage", target="t", is_success=True),
                StepResult(name="archive:zip", target="t", is_success=False, error="disk full"),
                StepResult(name="cleanup", target="t", is_success=True),
            ],
        )
        with patch("relpack.cli.main.package_from_config", return_value=failed):
            assert main(["-f", "zip", str(plain_project), "1.0"]) == 1

        assert capsys.readouterr().out == ""

    def test_failed_step_reported_once(self, plain_project, workdir, capsys):
        with patch(
            "relpack.packaging.archiver.ZipArchiver.write",
            side_effect=OSError("disk full"),
        ):
            assert main(["-f", "zip", "-f", "tgz", str(plain_project), "1.0"]) == 1

        captured = capsys.readouterr()
        assert captured.err.count("disk full") == 1
        assert "archive:zip" in captured.err
        assert captured.out.split() == ["myapp-1.0.tar.gz"]

    def test_verbose_lists_archived_entries(self, plain_project, workdir, capsys):
        assert main(["-v", "-f", "zip", str(plain_project), "1.0"]) == 0

        err = capsys.readouterr().err
        assert "Archiving myapp-1.0/README" in err
