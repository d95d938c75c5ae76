"""CLIConfig: Command-line operational overrides.

Minimal configuration for settings that commonly change between runs:
listing filters, output format, verbosity.
"""

from typing import Literal, Optional
from pydantic import Field
from czicat.schemas.base import CziCatBaseModel


class CLIConfig(CziCatBaseModel):
    """Command-line configuration overrides.

    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(output_format="json", log_level="DEBUG")
        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None
    output_format: Optional[Literal["table", "json", "csv"]] = None
    level0_only: Optional[bool] = None
    limit: Optional[int] = Field(None, ge=1)

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        export_overrides = {}
        if self.output_format is not None:
            export_overrides["output_format"] = self.output_format
        if self.level0_only is not None:
            export_overrides["level0_only"] = self.level0_only
        if self.limit is not None:
            export_overrides["limit"] = self.limit
        if export_overrides:
            overrides["export"] = export_overrides

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
