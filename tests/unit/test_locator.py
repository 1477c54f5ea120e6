"""
Unit tests for FileLocator (ripgrep is mocked).
"""
import shutil
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from orgdrill.content.locator import FileLocator
from orgdrill.core.errors import LocatorUnavailable


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def rg_on_path():
    with patch("orgdrill.content.locator.shutil.which", return_value="/usr/bin/rg"):
        yield


class TestAvailability:
    def test_missing_tool(self, tmp_path):
        with patch("orgdrill.content.locator.shutil.which", return_value=None):
            with pytest.raises(LocatorUnavailable, match="not found on PATH"):
                FileLocator().locate(tmp_path, ["exercise"])

    def test_root_must_be_directory(self, tmp_path, rg_on_path):
        with pytest.raises(LocatorUnavailable, match="not a directory"):
            FileLocator().locate(tmp_path / "missing", ["exercise"])

    def test_spawn_failure(self, tmp_path, rg_on_path):
        with patch("orgdrill.content.locator.subprocess.run", side_effect=PermissionError("denied")):
            with pytest.raises(LocatorUnavailable, match="Could not run"):
                FileLocator().locate(tmp_path, ["exercise"])


class TestLocate:
    def test_command_line(self, tmp_path, rg_on_path):
        with patch("orgdrill.content.locator.subprocess.run", return_value=_completed(1)) as run:
            FileLocator(file_glob="*.org").locate(tmp_path, ["exercise", "definition"])

        args = run.call_args.args[0]
        assert args[0] == "/usr/bin/rg"
        assert "--files-with-matches" in args
        assert "--fixed-strings" in args
        assert args[args.index("--glob") + 1] == "*.org"
        assert args[-1] == str(tmp_path)
        assert [args[i + 1] for i, a in enumerate(args) if a == "-e"] == ["exercise", "definition"]

    def test_results_sorted_and_deduplicated(self, tmp_path, rg_on_path):
        stdout = f"{tmp_path}/b.org\n{tmp_path}/a.org\n{tmp_path}/b.org\n\n"
        with patch("orgdrill.content.locator.subprocess.run", return_value=_completed(0, stdout)):
            found = FileLocator().locate(tmp_path, ["exercise"])
        assert found == [Path(tmp_path, "a.org"), Path(tmp_path, "b.org")]

    def test_no_matches_is_empty(self, tmp_path, rg_on_path):
        with patch("orgdrill.content.locator.subprocess.run", return_value=_completed(1)):
            assert FileLocator().locate(tmp_path, ["exercise"]) == []

    def test_error_without_output(self, tmp_path, rg_on_path):
        with patch("orgdrill.content.locator.subprocess.run", return_value=_completed(2, stderr="regex parse error")):
            with pytest.raises(LocatorUnavailable, match="regex parse error"):
                FileLocator().locate(tmp_path, ["exercise"])

    def test_error_with_partial_output_keeps_results(self, tmp_path, rg_on_path):
        result = _completed(2, stdout=f"{tmp_path}/a.org\n", stderr="permission denied")
        with patch("orgdrill.content.locator.subprocess.run", return_value=result):
            assert FileLocator().locate(tmp_path, ["exercise"]) == [Path(tmp_path, "a.org")]

    def test_empty_patterns_skip_search(self, tmp_path, rg_on_path):
        with patch("orgdrill.content.locator.subprocess.run") as run:
            assert FileLocator().locate(tmp_path, ["", ""]) == []
        run.assert_not_called()


@pytest.mark.requires_rg
@pytest.mark.skipif(shutil.which("rg") is None, reason="ripgrep not installed")
class TestRealRipgrep:
    def test_finds_textual_candidates(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "a.org").write_text(":TYPE: exercise\n", encoding="utf-8")
        (tmp_path / "sub" / "b.org").write_text("mentions definition in prose\n", encoding="utf-8")
        (tmp_path / "c.org").write_text("nothing here\n", encoding="utf-8")
        (tmp_path / "d.txt").write_text(":TYPE: exercise\n", encoding="utf-8")

        found = FileLocator().locate(tmp_path, ["exercise", "definition"])
        assert [p.name for p in found] == ["a.org", "b.org"]
