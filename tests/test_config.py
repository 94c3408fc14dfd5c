import json
from pathlib import Path

import pytest

from nrcli.config import (
    Config,
    ConfigError,
    ConfigValue,
    default_config_directory,
    load_config,
    valid_config_keys,
)
from nrcli.ternary import Ternary


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("NEW_RELIC_CLI_PRERELEASEFEATURES", raising=False)


@pytest.fixture
def cfg_dir(tmp_path):
    return str(tmp_path / "newrelic")


def test_load_initialises_directory(cfg_dir):
    c = load_config(cfg_dir)
    assert c.config_dir == cfg_dir
    assert c.log_level == "INFO"
    assert c.send_usage_data == Ternary.UNKNOWN
    assert c.pre_release_features == Ternary.UNKNOWN
    assert c.plugin_dir == default_config_directory() + "/plugins"


@pytest.mark.parametrize("level", ["ERROR", "WARN", "INFO", "DEBUG", "TRACE"])
def test_set_log_level(cfg_dir, level):
    c = load_config(cfg_dir)
    c.set("logLevel", level)
    assert c.log_level == level
    c2 = load_config(cfg_dir)
    assert c2.log_level == level


def test_set_log_level_sequence_persists(cfg_dir):
    c = load_config(cfg_dir)
    for level in ["ERROR", "WARN", "INFO", "DEBUG", "TRACE"]:
        c.set("logLevel", level)
        assert c.log_level == level
        assert load_config(cfg_dir).log_level == level


def test_set_log_level_invalid(cfg_dir):
    c = load_config(cfg_dir)
    with pytest.raises(ConfigError):
        c.set("logLevel", "INVALID_VALUE")
    assert c.log_level == "INFO"


@pytest.mark.parametrize("key,value", [("loglevel", "Info"), ("Loglevel", "Debug")])
def test_set_wrong_case_key(cfg_dir, key, value):
    c = load_config(cfg_dir)
    with pytest.raises(ConfigError, match="is not a valid key"):
        c.set(key, value)


@pytest.mark.parametrize(
    "key,attr", [("sendUsageData", "send_usage_data"), ("preReleaseFeatures", "pre_release_features")]
)
def test_set_ternaries(cfg_dir, key, attr):
    c = load_config(cfg_dir)
    for value in (Ternary.ALLOW, Ternary.DISALLOW, Ternary.UNKNOWN):
        c.set(key, value)
        assert getattr(c, attr) == value
    with pytest.raises(ConfigError):
        c.set(key, "INVALID_VALUE")


def test_set_plugin_dir(cfg_dir):
    c = load_config(cfg_dir)
    c.set("pluginDir", "test")
    assert c.plugin_dir == "test"


def test_file_written_as_global_scope(cfg_dir):
    c = load_config(cfg_dir)
    c.set("logLevel", "DEBUG")
    document = json.loads((Path(cfg_dir) / "config.json").read_text())
    assert document["*"]["logLevel"] == "DEBUG"
    assert set(document["*"]) == set(valid_config_keys())


def test_invalid_value_not_persisted(cfg_dir):
    c = load_config(cfg_dir)
    c.set("logLevel", "DEBUG")
    with pytest.raises(ConfigError):
        c.set("logLevel", "INVALID_VALUE")
    assert load_config(cfg_dir).log_level == "DEBUG"


def test_delete_restores_default(cfg_dir):
    c = load_config(cfg_dir)
    c.set("logLevel", "ERROR")
    c.delete("logLevel")
    assert c.log_level == "INFO"
    assert load_config(cfg_dir).log_level == "INFO"


def test_delete_unknown_key(cfg_dir):
    c = load_config(cfg_dir)
    with pytest.raises(ConfigError, match="failed to locate default value for nope"):
        c.delete("nope")


def test_prerelease_override(cfg_dir, monkeypatch):
    monkeypatch.setenv("NEW_RELIC_CLI_PRERELEASEFEATURES", "ALLOW")
    c = load_config(cfg_dir)
    assert c.pre_release_features.as_bool()


def test_expands_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("NRCLI_TEST_BASE", str(tmp_path))
    c = load_config("$NRCLI_TEST_BASE/conf")
    assert c.config_dir == str(tmp_path / "conf")


def test_parse_error(cfg_dir):
    Path(cfg_dir).mkdir(parents=True)
    (Path(cfg_dir) / "config.json").write_text("{not json")
    with pytest.raises(ConfigError, match="error parsing config file"):
        load_config(cfg_dir)


def test_reads_lowercase_keys(cfg_dir):
    Path(cfg_dir).mkdir(parents=True)
    (Path(cfg_dir) / "config.json").write_text(json.dumps({"*": {"loglevel": "Debug"}}))
    assert load_config(cfg_dir).log_level == "Debug"


def test_valid_config_keys_order():
    assert valid_config_keys() == [
        "logLevel",
        "pluginDir",
        "sendUsageData",
        "preReleaseFeatures",
    ]


def test_values_filter_and_default(cfg_dir):
    c = load_config(cfg_dir)
    values = c.values("logLevel")
    assert [v.name for v in values] == ["logLevel"]
    assert values[0].is_default()
    assert len(c.values()) == len(valid_config_keys())


def test_value_is_default_case_insensitive():
    assert ConfigValue("logLevel", "info", "INFO").is_default()
    assert not ConfigValue("logLevel", "DEBUG", "INFO").is_default()


def test_get_and_list_output(cfg_dir, capsys):
    c = load_config(cfg_dir)
    c.get("logLevel")
    out = capsys.readouterr().out
    assert "logLevel" in out and "pluginDir" not in out
    c.list()
    out = capsys.readouterr().out
    assert all(key in out for key in valid_config_keys())


def test_set_prints_confirmation(cfg_dir, capsys):
    c = load_config(cfg_dir)
    c.set("pluginDir", "test")
    assert "pluginDir set to test" in capsys.readouterr().out


def test_config_default_fields_empty():
    assert Config().log_level == ""