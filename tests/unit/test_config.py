"""Tests for configuration loading"""

import pytest
import yaml

from hostkit.config.manager import ConfigManager

ENV_VARS = (
    "HOSTKIT_TAILNET",
    "HOSTKIT_TS_API_TOKEN",
    "HOSTKIT_GRANTEE",
    "HOSTKIT_CREDENTIAL_FILE",
    "HOSTKIT_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path):
    config = ConfigManager(tmp_path / "missing.yaml").load()

    assert config["access"]["tag"] == "ssh-share"
    assert config["access"]["owners"] == ["autogroup:admin"]
    assert config["access"]["users"] == ["autogroup:nonroot"]
    assert config["access"]["push_policy"] == "changed"
    assert config["credential"]["max_attempts"] == 3
    assert config["tailscale"]["api_url"] == "https://api.tailscale.com/api/v2"


def test_file_merges_over_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"access": {"grantee": "a@x.com", "push_policy": "always"}}))

    config = ConfigManager(path).load()

    assert config["access"]["grantee"] == "a@x.com"
    assert config["access"]["push_policy"] == "always"
    assert config["access"]["tag"] == "ssh-share"


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"tailscale": {"tailnet": "file.example"}}))
    monkeypatch.setenv("HOSTKIT_TAILNET", "env.example")
    monkeypatch.setenv("HOSTKIT_TS_API_TOKEN", "tskey-api-env")
    monkeypatch.setenv("HOSTKIT_CREDENTIAL_FILE", "/tmp/cred")

    config = ConfigManager(path).load()

    assert config["tailscale"]["tailnet"] == "env.example"
    assert config["tailscale"]["token"] == "tskey-api-env"
    assert config["credential"]["path"] == "/tmp/cred"


def test_defaults_not_shared_between_loads(tmp_path):
    manager = ConfigManager(tmp_path / "missing.yaml")
    first = manager.load()
    first["install"]["recommended"].append("cowsay")
    assert "cowsay" not in manager.load()["install"]["recommended"]


def test_save_round_trip(tmp_path):
    path = tmp_path / "nested" / "config.yaml"
    manager = ConfigManager(path)
    manager.save({"access": {"grantee": "b@x.com"}})

    assert yaml.safe_load(path.read_text()) == {"access": {"grantee": "b@x.com"}}
