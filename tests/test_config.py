"""Tests for config.py — .pgrun.yml parsing."""

import pytest
import yaml

from pgrun.config import RunConfig, load_config, parse_config, validate


def test_parse_defaults():
    cfg = parse_config({})
    assert cfg == RunConfig(cwd=None, check=False, debug=False)


def test_parse_none():
    assert parse_config(None) == RunConfig()


def test_parse_all_keys():
    cfg = parse_config({"cwd": "/srv/app", "check": True, "debug": True})
    assert cfg.cwd == "/srv/app"
    assert cfg.check is True
    assert cfg.debug is True


def test_parse_string_bools():
    cfg = parse_config({"check": "yes", "debug": "false"})
    assert cfg.check is True
    assert cfg.debug is False


def test_parse_ignores_unknown_keys():
    cfg = parse_config({"timeout": 30, "check": True})
    assert cfg.check is True


def test_parse_rejects_non_mapping():
    with pytest.raises(ValueError, match="mapping"):
        parse_config(["cwd", "/tmp"])


def test_load_missing_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PGRUN_CONFIG", raising=False)
    assert load_config() == RunConfig()


def test_load_default_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PGRUN_CONFIG", raising=False)
    (tmp_path / ".pgrun.yml").write_text("check: true\ncwd: /tmp\n")
    cfg = load_config()
    assert cfg.check is True
    assert cfg.cwd == "/tmp"


def test_load_env_path(tmp_path, monkeypatch):
    path = tmp_path / "custom.yml"
    path.write_text("debug: true\n")
    monkeypatch.setenv("PGRUN_CONFIG", str(path))
    assert load_config().debug is True


def test_load_explicit_path_beats_env(tmp_path, monkeypatch):
    env_path = tmp_path / "env.yml"
    env_path.write_text("debug: true\n")
    explicit = tmp_path / "explicit.yml"
    explicit.write_text("debug: false\n")
    monkeypatch.setenv("PGRUN_CONFIG", str(env_path))
    assert load_config(str(explicit)).debug is False


def test_load_empty_file(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_config(str(path)) == RunConfig()


def test_load_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yml"
    path.write_text("check: [unclosed\n")
    with pytest.raises(yaml.YAMLError):
        load_config(str(path))


def test_validate_ok(tmp_path):
    assert validate(RunConfig(cwd=str(tmp_path))) == []
    assert validate(RunConfig()) == []


def test_validate_missing_cwd(tmp_path):
    problems = validate(RunConfig(cwd=str(tmp_path / "nope")))
    assert len(problems) == 1
    assert "cwd is not a directory" in problems[0]
