"""Command-line interface for flexvers."""

from __future__ import annotations

from flexvers.cli.main import app

__all__ = ["app"]
