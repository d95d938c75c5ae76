"""Configuration resolution and merging logic.

Single entrypoint: resolve_config(). It merges ParamConfig, UserConfig, and
CLIConfig in precedence order and returns a validated InternalConfig.

Precedence (highest to lowest):
1. CLIConfig (command-line overrides)
2. UserConfig (user file)
3. ParamConfig (defaults)
"""

from typing import Optional, Union
from czicat.schemas.param import ParamConfig
from czicat.schemas.user import UserConfig
from czicat.schemas.cli import CLIConfig
from czicat.schemas.internal import InternalConfig


def deep_merge(base: dict, *overrides: dict) -> dict:
    """Deep merge multiple dictionaries.

    Later dictionaries override earlier ones. Nested dictionaries are
    merged recursively; other values are replaced.

    Examples
    --------
    >>> deep_merge({"export": {"limit": None, "level0_only": False}},
    ...            {"export": {"limit": 10}})
    {'export': {'limit': 10, 'level0_only': False}}
    """
    result = base.copy()

    for override in overrides:
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = deep_merge(result[key], value)
            else:
                result[key] = value

    return result


def _as_model(value, model):
    if value is None or (isinstance(value, dict) and not value):
        return model()
    if isinstance(value, model):
        return value
    return model.model_validate(value)


def resolve_config(
    param_cfg: Optional[Union[dict, ParamConfig]] = None,
    user_cfg: Optional[Union[dict, UserConfig]] = None,
    cli_cfg: Optional[Union[dict, CLIConfig]] = None,
) -> InternalConfig:
    """Resolve final runtime configuration from param, user, and CLI configs.

    Parameters
    ----------
    param_cfg : dict or ParamConfig, optional
        Complete defaults. ``None`` means ``ParamConfig()``.
    user_cfg : dict or UserConfig, optional
        User overrides.
    cli_cfg : dict or CLIConfig, optional
        Command-line overrides.

    Returns
    -------
    InternalConfig
        Fully validated, immutable runtime configuration

    Raises
    ------
    ValidationError
        If any config fails Pydantic validation

    Examples
    --------
    >>> config = resolve_config(ParamConfig(), UserConfig(LEVEL0_ONLY=True))
    >>> config.export.level0_only
    True
    """
    param = _as_model(param_cfg, ParamConfig)
    user = _as_model(user_cfg, UserConfig)
    cli = _as_model(cli_cfg, CLIConfig)

    merged = deep_merge(
        param.model_dump(),
        user.to_internal_overrides(),
        cli.to_internal_overrides(),
    )

    return InternalConfig.model_validate(merged)
