"""Container inspection command line.

This module contains the inspector logic, separated from argument parsing.
``main()`` is a thin argparse wrapper around ``run_inspect()``.

Usage:
    czicat slide.czi info
    czicat slide.czi ranges --format json
    czicat slide.czi subblocks --level0 --limit 20
    czicat slide.czi extract 5 tile5.raw --segment pixels
    czicat slide.czi --config scripts/user_config.py scenes
"""

import argparse
import importlib.util
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd

from czicat.backends import ContainerBackend
from czicat.catalog import ContainerCatalog, dimension_table, scene_table, subblock_table
from czicat.errors import CatalogError, NotFound
from czicat.model import SegmentKind
from czicat.schemas import CLIConfig, InternalConfig, ParamConfig, UserConfig, resolve_config

__all__ = ['main', 'run_inspect', 'load_user_config_dict', 'setup_logging']

logger = logging.getLogger(__name__)

COMMANDS = ("info", "ranges", "scenes", "subblocks", "extract")
SEGMENTS = ("pixels", "metadata", "attachment")


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a single console handler."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Clear existing handlers and add new ones
    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    # Find CONFIG dict
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def _render(df: pd.DataFrame, output_format: str) -> str:
    if output_format == "json":
        return df.reset_index().to_json(orient="records")
    if output_format == "csv":
        return df.to_csv()
    return df.to_string()


def _info(catalog: ContainerCatalog, output_format: str) -> str:
    header = catalog.file_header()
    attachments = catalog.attachments()
    if output_format == "json":
        return json.dumps({
            "path": str(catalog.path),
            "guid": str(header.guid),
            "version": list(header.version),
            "subblocks": catalog.subblock_count(),
            "scenes": list(catalog.scene_bounding_boxes()),
            "attachments": [
                {"index": a.index, "name": a.name, "type": a.content_file_type, "guid": str(a.content_guid)}
                for a in attachments
            ],
        })
    lines = [
        f"File:        {catalog.path}",
        f"GUID:        {header.guid}",
        f"Version:     {header.major_version}.{header.minor_version}",
        f"Subblocks:   {catalog.subblock_count()}",
        f"Scenes:      {len(catalog.scene_bounding_boxes())}",
        f"Attachments: {len(attachments)}",
    ]
    lines.extend(
        f"  [{a.index}] {a.name} ({a.content_file_type}) {a.content_guid}" for a in attachments
    )
    return "\n".join(lines)


def _extract(catalog: ContainerCatalog, index: int, output: str, segment: str) -> str:
    with catalog.subblock(index) as sb:
        if segment == "pixels":
            size = sb.decoded_pixel_byte_size()
            buffer = bytearray(size)
            copied = sb.copy_pixels(buffer)
        else:
            kind = SegmentKind(segment)
            size = sb.raw_segment_size(kind)
            buffer = bytearray(size)
            copied = sb.copy_raw_segment(kind, buffer)
    if copied != size:
        raise NotFound(f"Subblock {index}: copied {copied} of {size} {segment} bytes")
    Path(output).write_bytes(bytes(buffer))
    logger.info("Wrote %d %s bytes of subblock %d to %s", size, segment, index, output)
    return f"{output}: {size} bytes"


def run_inspect(
    path: str,
    command: str,
    user_config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    index: Optional[int] = None,
    output: Optional[str] = None,
    segment: str = "pixels",
    backend: Optional[ContainerBackend] = None,
    configure_logging: bool = False,
) -> str:
    """Open a container, run one inspector command and return its text output.

    Parameters
    ----------
    path : str
        Container file.
    command : str
        One of ``info``, ``ranges``, ``scenes``, ``subblocks``, ``extract``.
    user_config_path : str, optional
        Python file holding a ``CONFIG`` dict.
    cli_args : dict, optional
        CLI overrides. Keys: log_level, output_format, level0_only, limit.
    index, output, segment
        ``extract`` only: subblock index, output file and which bytes to write.
    backend : ContainerBackend, optional
        Decode collaborator override.
    configure_logging : bool, optional
        If True, set up root logging at the resolved ``logging.level``.

    Returns
    -------
    str
        Rendered output.

    Raises
    ------
    CatalogError
        If the container cannot be opened or a lookup fails.
    ValueError
        If ``command`` is unknown or configuration validation fails.
    """
    if command not in COMMANDS:
        raise ValueError(f"Unknown command {command!r}; expected one of {COMMANDS}")

    user_cfg = UserConfig()
    if user_config_path:
        user_cfg = UserConfig.model_validate(load_user_config_dict(user_config_path))
    cli_dict = {k: v for k, v in (cli_args or {}).items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    config: InternalConfig = resolve_config(ParamConfig(), user_cfg, cli_cfg)
    if configure_logging:
        setup_logging(config.logging.level)
    output_format = config.export.output_format

    with ContainerCatalog.open(path, backend=backend, config=config) as catalog:
        if command == "info":
            return _info(catalog, output_format)
        if command == "ranges":
            return _render(dimension_table(catalog.dimension_ranges()), output_format)
        if command == "scenes":
            return _render(scene_table(catalog.scene_bounding_boxes()), output_format)
        if command == "subblocks":
            descriptors = catalog.subblocks_level0() if config.export.level0_only else catalog.subblocks()
            if config.export.limit is not None:
                descriptors = descriptors[:config.export.limit]
            return _render(subblock_table(descriptors), output_format)
        if index is None or output is None:
            raise ValueError("extract needs a subblock index and an output path")
        return _extract(catalog, index, output, segment)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="czicat", description="Inspect the subblock catalog of a CZI container")
    parser.add_argument("file", help="Path to the .czi container")
    parser.add_argument("--config", help="Path to user config file")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Override log level")
    parser.add_argument("--format", dest="output_format", choices=["table", "json", "csv"],
                        help="Output format")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("info", help="File header, counts and attachments")
    sub.add_parser("ranges", help="Dimension ranges")
    sub.add_parser("scenes", help="Scene bounding boxes")
    p_sub = sub.add_parser("subblocks", help="Subblock descriptor table")
    p_sub.add_argument("--level0", action="store_true", default=None, help="Only native, non-pyramid tiles")
    p_sub.add_argument("--limit", type=int, help="Maximum number of rows")
    p_ext = sub.add_parser("extract", help="Write one subblock's bytes to a file")
    p_ext.add_argument("index", type=int, help="Catalog index")
    p_ext.add_argument("output", help="Output file")
    p_ext.add_argument("--segment", choices=SEGMENTS, default="pixels", help="Which bytes to write")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    cli_args = {
        "log_level": "DEBUG" if args.verbose else args.log_level,
        "output_format": args.output_format,
        "level0_only": getattr(args, "level0", None),
        "limit": getattr(args, "limit", None),
    }
    try:
        text = run_inspect(
            args.file,
            args.command,
            user_config_path=args.config,
            cli_args=cli_args,
            index=getattr(args, "index", None),
            output=getattr(args, "output", None),
            segment=getattr(args, "segment", "pixels"),
            configure_logging=True,
        )
    except CatalogError as e:
        logger.error("%s", e)
        return 1

    print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
