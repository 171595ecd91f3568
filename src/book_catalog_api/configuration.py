"""
Settings loading for the catalog API.

Settings are assembled in three layers, later layers winning:

1. Built-in defaults (``DEFAULTS``)
2. An optional YAML file named by the ``CATALOG_CONFIG`` environment variable
3. Individual environment variables (``CATALOG_DB_PATH``, ``CATALOG_PER_PAGE``,
   ``CATALOG_LOG_LEVEL``)

A ``.env`` file in the working directory is loaded before reading the
environment.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

from .pagination import DEFAULT_PER_PAGE

DEFAULTS: Dict[str, Any] = {
    "database": {"path": "data/catalog.db"},
    "pagination": {"per_page": DEFAULT_PER_PAGE},
    "logging": {"level": "INFO"},
    "cors": {"allow_origins": ["*"]},
}

# Environment variable -> dotted config key
ENV_OVERRIDES: Dict[str, str] = {
    "CATALOG_DB_PATH": "database.path",
    "CATALOG_PER_PAGE": "pagination.per_page",
    "CATALOG_LOG_LEVEL": "logging.level",
}


def _env_overrides() -> DictConfig:
    dotlist = [f"{key}={os.environ[name]}" for name, key in ENV_OVERRIDES.items() if os.environ.get(name)]
    return OmegaConf.from_dotlist(dotlist)


def make_settings(overrides: Dict[str, Any] | None = None) -> DictConfig:
    """
    Build the effective settings.

    Args:
        overrides: Extra values merged last, mainly for tests

    Returns:
        Merged configuration in struct mode (unknown keys are rejected)

    Raises:
        FileNotFoundError: If ``CATALOG_CONFIG`` names a missing file
        omegaconf.errors.ConfigKeyError: If a layer introduces an unknown key
    """
    base = OmegaConf.create(DEFAULTS)
    OmegaConf.set_struct(base, True)

    layers = []
    config_file = os.environ.get("CATALOG_CONFIG")
    if config_file:
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found at {config_path}")
        layers.append(OmegaConf.load(config_path))
    layers.append(_env_overrides())
    if overrides:
        layers.append(OmegaConf.create(overrides))

    merged = DictConfig(OmegaConf.merge(base, *layers))
    if int(merged.pagination.per_page) < 1:
        raise ValueError(f"pagination.per_page must be positive, got {merged.pagination.per_page}")
    return merged


@lru_cache(maxsize=1)
def get_settings() -> DictConfig:
    load_dotenv()
    return make_settings()


def configure_logging(settings: DictConfig) -> None:
    level = str(settings.logging.level).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("book_catalog_api").setLevel(level)
