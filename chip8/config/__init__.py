"""Configuration system for the CHIP-8 interpreter."""

from .settings import QUIRK_LETTERS, Settings, cycles_for_speed

__all__ = ["QUIRK_LETTERS", "Settings", "cycles_for_speed"]
