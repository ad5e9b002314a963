import configparser

import pytest

from cookie_dl.browser import BrowserType
from cookie_dl.exceptions import (
    ConfigurationError,
    InvalidConfigurationError,
    UnsupportedBrowserError,
)
from cookie_dl.models.config import DEFAULT_USER_AGENT, DownloadConfig
from cookie_dl.storage.config_manager import ConfigManager


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "cookie-dl" / "config.ini"


def _write(path, body: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("[DEFAULT]\n" + body, encoding="utf-8")


def test_missing_file_uses_defaults(config_file):
    config = ConfigManager(config_file).load_config()
    assert config.browser is None
    assert config.browser_fallback is True
    assert config.use_cookies is True
    assert config.max_workers == 4
    assert config.user_agent == DEFAULT_USER_AGENT
    assert not config_file.exists()


def test_file_values_are_read(config_file):
    _write(
        config_file,
        "browser = Firefox\nbrowser_fallback = false\nmax_workers = 8\n"
        "output_dir = downloads\n",
    )
    config = ConfigManager(config_file).load_config()
    assert config.browser is BrowserType.FIREFOX
    assert config.browser_fallback is False
    assert config.max_workers == 8
    assert config.output_dir == "downloads"


def test_empty_browser_in_file_means_unset(config_file):
    _write(config_file, "browser =\n")
    assert ConfigManager(config_file).load_config().browser is None


def test_cli_overrides_file(config_file):
    _write(config_file, "browser = firefox\nmax_workers = 8\n")
    config = ConfigManager(config_file).load_config(
        {"browser": "edge", "max_workers": None, "source_urls": ["https://x.com/a"]}
    )
    assert config.browser is BrowserType.EDGE
    assert config.max_workers == 8
    assert config.source_urls == ["https://x.com/a"]


def test_unknown_browser_keeps_its_kind(config_file):
    with pytest.raises(UnsupportedBrowserError):
        ConfigManager(config_file).load_config({"browser": "netscape"})


def test_empty_browser_from_cli_is_invalid(config_file):
    with pytest.raises(InvalidConfigurationError):
        ConfigManager(config_file).load_config({"browser": "  "})


def test_out_of_range_workers(config_file):
    with pytest.raises(ConfigurationError, match="validation failed"):
        ConfigManager(config_file).load_config({"max_workers": 64})


def test_non_numeric_value_in_file(config_file):
    _write(config_file, "max_workers = many\n")
    with pytest.raises(ConfigurationError):
        ConfigManager(config_file).load_config()


def test_save_new_config_writes_every_key(config_file):
    ConfigManager(config_file).save_new_config({"browser": BrowserType.SAFARI})

    parser = configparser.ConfigParser()
    parser.read(config_file, encoding="utf-8")
    section = parser["DEFAULT"]
    assert set(section) == DownloadConfig.get_ini_keys()
    assert section["browser"] == "safari"
    assert section["use_cookies"] == "true"


def test_saved_user_agent_survives_percent_signs(config_file):
    ConfigManager(config_file).save_new_config({"user_agent": "Agent/100%"})
    assert ConfigManager(config_file).load_config().user_agent == "Agent/100%"


def test_migration_adds_missing_keys(config_file):
    _write(config_file, "max_workers = 2\n")
    config = ConfigManager(config_file).load_config()
    assert config.max_workers == 2

    parser = configparser.ConfigParser()
    parser.read(config_file, encoding="utf-8")
    assert "use_cookies" in parser["DEFAULT"]
    assert parser["DEFAULT"]["max_workers"] == "2"


def test_get_config_as_dict_without_file(config_file):
    assert ConfigManager(config_file).get_config_as_dict() == {}
