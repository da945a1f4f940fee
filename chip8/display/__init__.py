"""Display subsystem for the CHIP-8 interpreter."""

from .framebuffer import Framebuffer

__all__ = ["Framebuffer"]
