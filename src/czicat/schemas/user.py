"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs with aliases for common naming patterns
(e.g., LOG_LEVEL -> log_level, LEVEL0_ONLY -> level0_only).

UserConfig is intentionally minimal - users only specify what they want
to override from the defaults.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from czicat.schemas.base import CziCatBaseModel


class UserReaderConfig(CziCatBaseModel):
    """User-facing reader config."""
    backend: Optional[str] = None

    @field_validator("backend", mode="before")
    @classmethod
    def normalize_backend(cls, v):
        """Normalize backend names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v


class UserCatalogConfig(CziCatBaseModel):
    """User-facing catalog config."""
    verify_contracts: Optional[bool] = None


class UserExportConfig(CziCatBaseModel):
    """User-facing export config."""
    level0_only: Optional[bool] = None
    limit: Optional[int] = None
    output_format: Optional[str] = None


class UserConfig(CziCatBaseModel):
    """User-facing configuration schema.

    Usage
    -----
        user_cfg = UserConfig(
            level0_only=True,
            output_format="csv",
            log_level="DEBUG",
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Flat settings
    backend: Optional[str] = Field(None, alias="BACKEND")
    verify_contracts: Optional[bool] = Field(None, alias="VERIFY_CONTRACTS")
    level0_only: Optional[bool] = Field(None, alias="LEVEL0_ONLY")
    limit: Optional[int] = Field(None, alias="LIMIT")
    output_format: Optional[str] = Field(None, alias="OUTPUT_FORMAT")
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(None, alias="LOG_LEVEL")

    # Nested overrides (advanced users)
    reader: Optional[UserReaderConfig] = None
    catalog: Optional[UserCatalogConfig] = None
    export: Optional[UserExportConfig] = None

    model_config = CziCatBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("backend", "output_format", mode="before")
    @classmethod
    def normalize_names(cls, v):
        """Normalize names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper().strip()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        reader = {}
        if self.backend is not None:
            reader["backend"] = self.backend
        if self.reader is not None:
            reader.update(self.reader.model_dump(exclude_none=True))
        if reader:
            overrides["reader"] = reader

        catalog = {}
        if self.verify_contracts is not None:
            catalog["verify_contracts"] = self.verify_contracts
        if self.catalog is not None:
            catalog.update(self.catalog.model_dump(exclude_none=True))
        if catalog:
            overrides["catalog"] = catalog

        export = {}
        if self.level0_only is not None:
            export["level0_only"] = self.level0_only
        if self.limit is not None:
            export["limit"] = self.limit
        if self.output_format is not None:
            export["output_format"] = self.output_format
        if self.export is not None:
            export.update(self.export.model_dump(exclude_none=True))
        if export:
            overrides["export"] = export

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
