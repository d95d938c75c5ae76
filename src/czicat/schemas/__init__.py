"""Pydantic configuration schemas for czicat.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Complete defaults
UserConfig : class
    User-facing configuration (forgiving, minimal)
CLIConfig : class
    Command-line operational overrides
"""

from czicat.schemas.resolve import resolve_config
from czicat.schemas.internal import InternalConfig
from czicat.schemas.param import ParamConfig
from czicat.schemas.user import UserConfig
from czicat.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
]
