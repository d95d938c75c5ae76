"""ParamConfig: defaults for the catalog, export and logging.

ALL tunable parameters must have defaults here. Runtime code never reads
from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from czicat.schemas.base import CziCatBaseModel


# =============================================================================
# Nested Configuration Models
# =============================================================================

class ReaderConfig(CziCatBaseModel):
    """Container decode backend selection."""
    backend: Literal["czifile"] = "czifile"

    @field_validator("backend", mode="before")
    @classmethod
    def normalize_backend_name(cls, v):
        """Normalize backend names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v


class CatalogConfig(CziCatBaseModel):
    """Catalog build settings."""
    verify_contracts: bool = Field(True, description="Check catalog invariants after the enumeration pass")


class ExportConfig(CziCatBaseModel):
    """Descriptor listing and table export settings."""
    level0_only: bool = False
    limit: Optional[int] = Field(None, ge=1, description="Maximum number of descriptors listed")
    output_format: Literal["table", "json", "csv"] = "table"


class LoggingConfig(CziCatBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(CziCatBaseModel):
    """Complete configuration with all defaults.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    reader: ReaderConfig = Field(default_factory=ReaderConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
