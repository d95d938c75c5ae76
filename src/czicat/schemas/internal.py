"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and immutable.
"""

from typing import Literal, Optional
from pydantic import ConfigDict, Field
from czicat.schemas.base import CziCatBaseModel


class InternalReaderConfig(CziCatBaseModel):
    """Runtime reader configuration."""
    backend: Literal["czifile"]


class InternalCatalogConfig(CziCatBaseModel):
    """Runtime catalog configuration."""
    verify_contracts: bool


class InternalExportConfig(CziCatBaseModel):
    """Runtime export configuration."""
    level0_only: bool
    limit: Optional[int] = Field(ge=1)
    output_format: Literal["table", "json", "csv"]


class InternalLoggingConfig(CziCatBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class InternalConfig(CziCatBaseModel):
    """Authoritative runtime configuration.

    Runtime modules receive InternalConfig and access fields directly:

        backend = get_backend(config.reader.backend)  # NOT .get()

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation in runtime code
    """

    reader: InternalReaderConfig
    catalog: InternalCatalogConfig
    export: InternalExportConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
