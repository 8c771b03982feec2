"""Unit tests for cli.config module."""

import pytest
from unittest.mock import patch

from src.cli.config import ConfigLoader
from src.cli.errors import ConfigError, ConfigNotFoundError
from src.cli.models import SyncSettings

ENV_VARS = ('NOTION_TOKEN', 'DATABASE_ID', 'REQUEST_TIMEOUT_MS', 'NUMBER_OF_POSTS_PER_PAGE')


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Run each test in an empty directory with no relevant env vars or .env."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    with patch('src.cli.config.load_dotenv'):
        yield


def _write_config(tmp_path, content, name="config.yaml"):
    path = tmp_path / name
    path.write_text(content)
    return str(path)


class TestLoadDefaults:
    """Test cases for default settings."""

    def test_defaults_without_file_or_env(self):
        assert ConfigLoader.load() == SyncSettings()

    def test_default_values(self):
        settings = ConfigLoader.load()

        assert settings.page_size == 100
        assert settings.request_timeout_ms == 10000
        assert settings.posts_per_page == 10
        assert settings.max_retries == 2
        assert settings.image_dir == "public/notion"
        assert settings.notion_version == "2022-06-28"

    def test_default_path_is_read(self, tmp_path):
        (tmp_path / ".notion-sync").mkdir()
        (tmp_path / ".notion-sync" / "config.yaml").write_text("posts_per_page: 5\n")

        assert ConfigLoader.load().posts_per_page == 5


class TestLoadFile:
    """Test cases for YAML parsing."""

    def test_all_options(self, tmp_path):
        path = _write_config(tmp_path, (
            "database_id: db123\n"
            "page_size: 50\n"
            "request_timeout_ms: 3000\n"
            "max_retries: 0\n"
            "max_workers: 4\n"
            "image_dir: out/img\n"
            "image_width: 1200\n"
            "snapshot_dir: snaps\n"
            "save_snapshots: true\n"
        ))

        settings = ConfigLoader.load(path)

        assert settings.database_id == "db123"
        assert settings.page_size == 50
        assert settings.request_timeout_ms == 3000
        assert settings.max_retries == 0
        assert settings.max_workers == 4
        assert settings.image_dir == "out/img"
        assert settings.image_width == 1200
        assert settings.snapshot_dir == "snaps"
        assert settings.save_snapshots is True

    def test_empty_file(self, tmp_path):
        assert ConfigLoader.load(_write_config(tmp_path, "")) == SyncSettings()

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigNotFoundError):
            ConfigLoader.load(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.load(_write_config(tmp_path, "page_size: [unclosed\n"))
        assert "Invalid YAML" in str(exc_info.value)

    def test_non_mapping(self, tmp_path):
        with pytest.raises(ConfigError):
            ConfigLoader.load(_write_config(tmp_path, "- a\n- b\n"))

    def test_unknown_option(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.load(_write_config(tmp_path, "pagesize: 10\n"))
        assert "pagesize" in str(exc_info.value)

    def test_token_not_allowed_in_file(self, tmp_path):
        with pytest.raises(ConfigError):
            ConfigLoader.load(_write_config(tmp_path, "notion_token: secret_abc\n"))


class TestValidation:
    """Test cases for value validation."""

    @pytest.mark.parametrize("content,field", [
        ("page_size: 0\n", "page_size"),
        ("page_size: 101\n", "page_size"),
        ("page_size: many\n", "page_size"),
        ("posts_per_page: 0\n", "posts_per_page"),
        ("request_timeout_ms: -5\n", "request_timeout_ms"),
        ("max_retries: -1\n", "max_retries"),
        ("max_workers: 0\n", "max_workers"),
        ("image_width: 0\n", "image_width"),
        ("image_width: true\n", "image_width"),
        ("save_snapshots: 'yes'\n", "save_snapshots"),
        ("save_snapshots: true\n", "save_snapshots"),
        ("image_dir: ''\n", "image_dir"),
    ])
    def test_invalid_values_name_field(self, tmp_path, content, field):
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.load(_write_config(tmp_path, content))
        assert exc_info.value.config_field == field


class TestEnvironmentOverrides:
    """Test cases for environment variables."""

    def test_environment_wins_over_file(self, tmp_path, monkeypatch):
        path = _write_config(tmp_path, "posts_per_page: 5\nrequest_timeout_ms: 3000\n")
        monkeypatch.setenv('NUMBER_OF_POSTS_PER_PAGE', '20')
        monkeypatch.setenv('REQUEST_TIMEOUT_MS', '15000')

        settings = ConfigLoader.load(path)

        assert settings.posts_per_page == 20
        assert settings.request_timeout_ms == 15000

    def test_credentials_from_environment(self, monkeypatch):
        monkeypatch.setenv('NOTION_TOKEN', ' secret_abc ')
        monkeypatch.setenv('DATABASE_ID', 'db-env')

        settings = ConfigLoader.load()

        assert settings.notion_token == 'secret_abc'
        assert settings.database_id == 'db-env'

    def test_invalid_environment_value(self, monkeypatch):
        monkeypatch.setenv('REQUEST_TIMEOUT_MS', 'soon')

        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.load()
        assert exc_info.value.config_field == 'request_timeout_ms'

    def test_dotenv_is_loaded(self):
        with patch('src.cli.config.load_dotenv') as mock_load_dotenv:
            ConfigLoader.load()
        mock_load_dotenv.assert_called_once()
