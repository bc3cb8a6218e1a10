"""Tests for configuration and the build configuration provider."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from update_state import (
    ConfigMissingError,
    UpdateStateConfig,
    VersionType,
    auth_headers,
    load_build_info,
)
from update_state.core import config as config_module
from update_state.core.constants import FETCH_TAG_URL


def test_defaults_from_empty_env(monkeypatch):
    for key in ("UPDATE_VERSION_TYPE", "UPDATE_TAG_URL", "OPENAI_API_KEY", "UPDATE_STATE_PATH"):
        monkeypatch.delenv(key, raising=False)

    config = UpdateStateConfig.from_env()

    assert config.version_type == VersionType.TAG
    assert config.tag_url == FETCH_TAG_URL
    assert config.api_key is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("UPDATE_VERSION_TYPE", "DATE")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("UPDATE_REQUEST_TIMEOUT", "3.5")
    monkeypatch.setenv("UPDATE_STATE_PATH", "/tmp/state.json")

    config = UpdateStateConfig.from_env()

    assert config.version_type == VersionType.DATE
    assert config.api_key == "sk-env"
    assert config.request_timeout == 3.5
    assert config.state_path == Path("/tmp/state.json")


def test_invalid_values_fall_back(monkeypatch):
    monkeypatch.setenv("UPDATE_VERSION_TYPE", "semver")
    monkeypatch.setenv("UPDATE_REQUEST_TIMEOUT", "soon")

    config = UpdateStateConfig.from_env()

    assert config.version_type == VersionType.TAG
    assert config.request_timeout == 15.0


def test_auth_headers():
    assert auth_headers("k")["Authorization"] == "Bearer k"
    assert "Authorization" not in auth_headers(None)


def test_build_info_from_env(monkeypatch):
    monkeypatch.setenv("BUILD_VERSION", "v3.0.0")
    monkeypatch.setenv("BUILD_COMMIT_DATE", "1700000000000")

    info = load_build_info()

    assert info.version == "v3.0.0"
    assert info.for_type(VersionType.DATE) == "1700000000000"
    assert info.for_type(VersionType.TAG) == "v3.0.0"


def test_build_info_from_git(monkeypatch):
    monkeypatch.setenv("BUILD_VERSION", "v3.0.0")
    monkeypatch.delenv("BUILD_COMMIT_DATE", raising=False)
    completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="1700000000\n")

    with patch.object(config_module.subprocess, "run", return_value=completed):
        info = load_build_info()

    assert info.commit_date == "1700000000000"


def test_build_info_missing(monkeypatch):
    monkeypatch.delenv("BUILD_VERSION", raising=False)
    monkeypatch.delenv("BUILD_COMMIT_DATE", raising=False)
    monkeypatch.setattr(config_module, "_distribution_version", lambda: None)
    monkeypatch.setattr(config_module, "_git_commit_date", lambda cwd=None: None)

    with pytest.raises(ConfigMissingError):
        load_build_info()
