"""Command-line client for the listentotaxman UK tax calculation service."""

from .version import get_project_version

__all__ = ["get_project_version"]
