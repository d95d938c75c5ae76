"""czicat User Configuration.

This is the user-facing configuration file. Modify settings here to customize
how containers are opened and listed. Defaults live in
``czicat.schemas.param.ParamConfig``.

Usage:
    czicat slide.czi --config scripts/user_config.py info
    czicat slide.czi --config scripts/user_config.py subblocks
    czicat slide.czi --config scripts/user_config.py --format json ranges
"""

CONFIG = {
    # ========================================================================
    # READER
    # ========================================================================
    "BACKEND": "czifile",       # Decode collaborator; only "czifile" ships

    # ========================================================================
    # CATALOG
    # ========================================================================
    "VERIFY_CONTRACTS": True,   # Check catalog invariants after enumeration

    # ========================================================================
    # LISTING / EXPORT
    # ========================================================================
    "LEVEL0_ONLY": False,       # List only native, non-pyramid tiles
    "LIMIT": None,              # Maximum rows in subblock listings (None = all)
    "OUTPUT_FORMAT": "table",   # "table", "json" or "csv"

    # ========================================================================
    # LOGGING
    # ========================================================================
    "LOG_LEVEL": "INFO",
}
