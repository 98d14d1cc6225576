"""CLI module for logocrop.

Provides the command-line interface for cropping images and inspecting
rotated bounding boxes.
"""

from __future__ import annotations

from logocrop.cli.main import app

__all__ = ["app"]
