"""
Module: tests.test_config
Purpose: Defaults, YAML overrides and environment override of the configuration
"""

import pytest

from adv_client import config as config_module
from adv_client.config import BACKEND_ENV_VAR, Config, get_config, reset_config
from adv_client.transport import ServiceClient


def test_defaults(monkeypatch):
    monkeypatch.delenv(BACKEND_ENV_VAR, raising=False)
    config = Config()

    assert config.get_service_url("probe") == "http://localhost:8000/"
    assert config.get_service_url("generate") == "http://localhost:8000/generate-adversarial/"
    assert config.get_strength_bounds() == (0.0, 0.5)
    assert config.strength["default"] == 0.1
    assert config.get_timeout("probe") == 5.0


def test_unknown_endpoint():
    with pytest.raises(KeyError):
        Config().get_service_url("upload")


def test_yaml_overrides_merge_per_section(tmp_path, monkeypatch):
    monkeypatch.delenv(BACKEND_ENV_VAR, raising=False)
    override = tmp_path / "local.yaml"
    override.write_text(
        "service:\n"
        "  base_url: http://gpu-box:9000/\n"
        "  generate_timeout: null\n"
        "strength:\n"
        "  default: 0.25\n"
    )

    config = Config(override)

    assert config.get_service_url("generate") == "http://gpu-box:9000/generate-adversarial/"
    assert config.get_timeout("generate") is None
    assert config.get_timeout("probe") == 5.0
    assert config.strength == {"default": 0.25, "min": 0.0, "max": 0.5, "step": 0.01}


def test_environment_overrides_base_url(monkeypatch):
    monkeypatch.setenv(BACKEND_ENV_VAR, "http://127.0.0.1:8008")

    client = ServiceClient(config=Config())

    assert client.base_url == "http://127.0.0.1:8008"


def test_get_config_is_a_singleton(tmp_path, monkeypatch):
    monkeypatch.setattr(config_module, "CONFIG_DIR", tmp_path)
    reset_config()
    try:
        assert get_config() is get_config()
    finally:
        reset_config()
