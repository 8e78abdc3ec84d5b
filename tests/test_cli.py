"""Tests for the command line interface."""

import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from mediagallery.cli.main import init_project, main, scan_directory


class TestScan:
    """The scan command."""

    @pytest.mark.asyncio
    async def test_scan_summary(self, media_dir: Path) -> None:
        """Scanning reports totals, letters and tags."""
        summary = await scan_directory(str(media_dir))
        assert summary["total"] == 3
        assert summary["letters"] == ["A", "B"]
        assert summary["tags"] == ["apple", "banana"]
        assert "page" not in summary

    @pytest.mark.asyncio
    async def test_scan_with_page(self, media_dir: Path) -> None:
        """A requested page lists names in natural order."""
        summary = await scan_directory(str(media_dir), page=1, limit=2, letter="a")
        assert summary["page"] == {
            "page": 1,
            "total": 2,
            "totalPages": 1,
            "hasMore": False,
            "names": ["Apple.jpg", "apple2.jpg"],
        }

    def test_scan_command_prints_json(
        self, media_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch.object(sys, "argv", ["mediagallery", "scan", str(media_dir)]):
            main()
        assert json.loads(capsys.readouterr().out)["total"] == 3

    def test_scan_missing_directory_exits(self, tmp_path: Path) -> None:
        with patch.object(sys, "argv", ["mediagallery", "scan", str(tmp_path / "missing")]):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 1


class TestInit:
    """The init command."""

    def test_writes_settings(self, tmp_path: Path) -> None:
        init_project(str(tmp_path), media_root="/srv/media")
        content = (tmp_path / "settings.toml").read_text()
        assert 'media_root = "/srv/media"' in content

    def test_keeps_existing_settings(self, tmp_path: Path) -> None:
        (tmp_path / "settings.toml").write_text("port = 1\n")
        init_project(str(tmp_path))
        assert (tmp_path / "settings.toml").read_text() == "port = 1\n"
