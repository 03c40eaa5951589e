"""Tests for how the marketplace domain picks up its configuration."""

import tomllib
from pathlib import Path
from types import SimpleNamespace

import marketplace.domain as domain_module
from marketplace.domain import load_secret_key


def test_domain_toml_has_no_secret_key():
    config_file = Path(domain_module.__file__).with_name("domain.toml")
    with config_file.open("rb") as f:
        assert "secret_key" not in tomllib.load(f)


def test_secret_key_comes_from_environment():
    domain = SimpleNamespace(config={})
    load_secret_key(domain, environ={"SHOPSY_SECRET_KEY": "from-env"})
    assert domain.config["secret_key"] == "from-env"


def test_unset_environment_leaves_config_alone():
    domain = SimpleNamespace(config={"secret_key": "generated"})
    load_secret_key(domain, environ={})
    assert domain.config["secret_key"] == "generated"
