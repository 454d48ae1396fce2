"""Configuration loading tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from core.policy_runtime import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG,
    configure_logging,
    load_effective_config,
    load_yaml,
    merge_dicts,
)


def test_defaults_when_no_file(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    config = load_effective_config()

    assert config == DEFAULT_CONFIG
    # Returned config must not alias the module defaults.
    config["runner"]["shell"] = True
    assert DEFAULT_CONFIG["runner"]["shell"] is False


def test_user_file_overrides_nested_keys(tmp_path: Path) -> None:
    cfg = tmp_path / "runcmd.yaml"
    cfg.write_text("runner:\n  shell: true\nlogging:\n  level: debug\n", encoding="utf-8")

    config = load_effective_config(cfg)

    assert config["runner"] == {"verbose": False, "shell": True, "shell_executable": None}
    assert config["logging"]["level"] == "debug"


def test_env_var_points_at_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg = tmp_path / "env.yaml"
    cfg.write_text("runner:\n  verbose: true\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(cfg))

    assert load_effective_config()["runner"]["verbose"] is True


def test_load_yaml_missing_file_is_empty(tmp_path: Path) -> None:
    assert load_yaml(tmp_path / "absent.yaml") == {}


def test_load_yaml_rejects_non_mapping(tmp_path: Path) -> None:
    cfg = tmp_path / "list.yaml"
    cfg.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        load_yaml(cfg)


def test_merge_dicts_is_recursive_and_non_destructive() -> None:
    base = {"a": {"x": 1, "y": 2}, "b": 1}
    merged = merge_dicts(base, {"a": {"y": 3}, "c": 4})

    assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}
    assert base == {"a": {"x": 1, "y": 2}, "b": 1}


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError, match="log level"):
        configure_logging({"logging": {"level": "chatty"}})


def test_configure_logging_accepts_lowercase(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging({"logging": {"level": "info"}})

    assert calls[0]["level"] == logging.INFO
