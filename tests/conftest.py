"""Root-level pytest fixtures for the czicat test suite.

Provides shared configuration fixtures following the Pydantic-based
architecture, plus an in-memory container (``tests.helpers.fake_container``)
so catalog tests never need a real .czi file or the czifile package.
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from czicat.catalog import ContainerCatalog
from czicat.schemas import ParamConfig, UserConfig, resolve_config
from tests.helpers.fake_container import (
    FakeBackend,
    FakeHandle,
    two_scene_tiles,
    write_container_file,
)


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Defaults for every setting.

    Use this as the base for all test configs. Override specific values
    using make_config or by creating custom UserConfig instances.
    """
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides)."""
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Examples
    --------
    >>> def test_no_contracts(make_config):
    ...     config = make_config(verify_contracts=False)
    ...     assert config.catalog.verify_contracts is False
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        else:
            return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def container_path(temp_dir):
    """Placeholder .czi file; its content is served by a FakeBackend."""
    return write_container_file(temp_dir)


# =============================================================================
# Catalog Fixtures
# =============================================================================

@pytest.fixture
def open_fake(container_path, internal_config):
    """Factory: open a catalog over the given tiles.

    Returns (catalog, handle). Catalogs still open at teardown are closed.
    """
    opened = []

    def _open(tiles, config=None, **handle_kwargs):
        handle = FakeHandle(tiles, **handle_kwargs)
        catalog = ContainerCatalog.open(
            container_path,
            backend=FakeBackend(handle),
            config=config or internal_config,
        )
        opened.append(catalog)
        return catalog, handle

    yield _open
    for catalog in opened:
        catalog.close()


@pytest.fixture
def two_scene_catalog(open_fake):
    """Catalog with four native tiles over scenes 0 and 1."""
    catalog, _ = open_fake(two_scene_tiles())
    return catalog
