"""Tests for settings loading."""

from pathlib import Path

import pytest

from mediagallery.settings import Settings


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test where no settings.toml exists."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestSettings:
    """Defaults, environment and TOML sources."""

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.cache_ttl_seconds == 300.0
        assert settings.default_page_size == 20
        assert settings.max_page_size == 1000
        assert settings.background_refresh is False
        assert settings.tag_file_path is None
        assert settings.placeholder_image_path is None

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """MEDIAGALLERY_-prefixed variables override defaults."""
        monkeypatch.setenv("MEDIAGALLERY_CACHE_TTL_SECONDS", "5")
        monkeypatch.setenv("MEDIAGALLERY_MEDIA_ROOT", "/srv/media")
        settings = Settings()
        assert settings.cache_ttl_seconds == 5.0
        assert settings.media_root_path == Path("/srv/media")
        assert settings.thumbnail_dir == Path("/srv/media/.thumbnails")

    def test_toml_file(self, isolated_cwd: Path) -> None:
        """settings.toml in the working directory is read."""
        (isolated_cwd / "settings.toml").write_text('media_root = "/data/pics"\nport = 8080\n')
        settings = Settings()
        assert settings.media_root == "/data/pics"
        assert settings.port == 8080

    def test_custom_toml_overrides_base(self, isolated_cwd: Path) -> None:
        """settings.custom.toml wins over settings.toml."""
        (isolated_cwd / "settings.toml").write_text("port = 8080\ncache_ttl_seconds = 10\n")
        (isolated_cwd / "settings.custom.toml").write_text("port = 8181\n")
        settings = Settings()
        assert settings.port == 8181
        assert settings.cache_ttl_seconds == 10.0

    def test_init_command_output_is_loaded(self, isolated_cwd: Path) -> None:
        """The file written by ``mediagallery init`` configures the app."""
        from mediagallery.cli.main import init_project

        init_project(str(isolated_cwd), media_root="/srv/gallery")
        assert Settings().media_root == "/srv/gallery"

    def test_init_arguments_win(self, isolated_cwd: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Explicit arguments take priority over environment and TOML."""
        (isolated_cwd / "settings.toml").write_text("port = 8080\n")
        monkeypatch.setenv("MEDIAGALLERY_PORT", "9090")
        assert Settings().port == 9090
        assert Settings(port=7070).port == 7070

    def test_log_dir(self, isolated_cwd: Path) -> None:
        """Without log_dir, logs go to ./logs."""
        assert Settings().get_log_dir() == isolated_cwd / "logs"
        assert Settings(log_dir="/var/log/gallery").get_log_dir() == Path("/var/log/gallery")
