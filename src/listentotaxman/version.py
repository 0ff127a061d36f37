"""Version lookup for ``listentotaxman version``."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "listentotaxman"
PYPROJECT_PATH: Final = Path(__file__).resolve().parents[2] / "pyproject.toml"


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the installed distribution version.

    A source checkout run without installing has no distribution metadata;
    the ``[project]`` table of ``pyproject.toml`` answers instead.
    """

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return read_pyproject_version(PYPROJECT_PATH)


def read_pyproject_version(path: Path) -> str:
    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except FileNotFoundError as error:
        raise RuntimeError(f"Unable to locate project metadata at {path}") from error

    version = document.get("project", {}).get("version")
    if not version:
        raise RuntimeError(f"No [project] version declared in {path}")
    return str(version)


__all__ = ["get_project_version", "read_pyproject_version"]
