"""Version of the Car Rental API.

Installed builds report the distribution metadata; a source checkout reads
``[project].version`` from the repository's pyproject.toml.
"""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION = "car-rental-api"

# src/api/infrastructure/version.py -> repository root
_PYPROJECT = Path(__file__).resolve().parents[3] / "pyproject.toml"


def _source_version() -> str:
    with _PYPROJECT.open("rb") as f:
        return tomllib.load(f)["project"]["version"]


def get_version() -> str:
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return _source_version()


__version__ = get_version()
