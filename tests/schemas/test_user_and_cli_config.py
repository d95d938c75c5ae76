"""Tests for UserConfig normalization and CLIConfig overrides."""

import pytest
from pydantic import ValidationError

from czicat.schemas.cli import CLIConfig
from czicat.schemas.param import ParamConfig
from czicat.schemas.user import UserConfig


def test_uppercase_keys_are_handled():
    raw = {
        "BACKEND": "CZIFILE",
        "VERIFY_CONTRACTS": False,
        "LEVEL0_ONLY": True,
        "LIMIT": 25,
        "OUTPUT_FORMAT": " JSON ",
        "LOG_LEVEL": "debug",
    }

    user = UserConfig.model_validate(raw)

    assert user.backend == "czifile"
    assert user.verify_contracts is False
    assert user.level0_only is True
    assert user.limit == 25
    assert user.output_format == "json"
    assert user.log_level == "DEBUG"


def test_unknown_keys_are_ignored():
    raw = {"LEVEL0_ONLY": True, "UNKNOWN_LEGACY": 12345}
    user = UserConfig.model_validate(raw)

    assert user.level0_only is True
    # Unknown key should not become an attribute nor raise
    assert not hasattr(user, "UNKNOWN_LEGACY")


def test_user_overrides_only_set_fields():
    assert UserConfig().to_internal_overrides() == {}
    assert UserConfig(limit=3).to_internal_overrides() == {"export": {"limit": 3}}


def test_cli_to_internal_overrides_with_log_level():
    """Test CLI config conversion with log_level override."""
    overrides = CLIConfig(log_level="DEBUG").to_internal_overrides()
    assert overrides["logging"]["level"] == "DEBUG"


def test_cli_to_internal_overrides_with_multiple_fields():
    """Test CLI config conversion with multiple overrides."""
    cli = CLIConfig(output_format="csv", level0_only=True, limit=7)
    overrides = cli.to_internal_overrides()
    assert overrides["export"] == {"output_format": "csv", "level0_only": True, "limit": 7}
    assert "logging" not in overrides


def test_cli_empty_has_no_overrides():
    assert CLIConfig().to_internal_overrides() == {}


def test_cli_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        CLIConfig(scene_id=3)


def test_param_config_strict():
    with pytest.raises(ValidationError):
        ParamConfig.model_validate({"export": {"output_format": "xlsx"}})
