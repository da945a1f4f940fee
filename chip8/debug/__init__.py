"""Debugging utilities for the CHIP-8 interpreter."""

from .renderer import DisplayRenderer

__all__ = ["DisplayRenderer"]
