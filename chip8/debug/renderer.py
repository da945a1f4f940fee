"""Display rendering utilities for the CHIP-8 interpreter."""

from typing import TYPE_CHECKING, Tuple

from PIL import Image, ImageDraw, ImageFont

from ..display import Framebuffer

if TYPE_CHECKING:
    from ..emulator import Chip8Emulator


class DisplayRenderer:
    """Renders the framebuffer to images for debugging and test fixtures."""

    def __init__(self, scale: int = 8,
                 bg_color: Tuple[int, int, int] = (0, 0, 0),
                 fg_color: Tuple[int, int, int] = (255, 255, 255)):
        if scale < 1:
            raise ValueError(f"Scale must be at least 1: {scale}")
        self.scale = scale
        self.bg_color = bg_color
        self.fg_color = fg_color

    def render_display(self, framebuffer: Framebuffer) -> Image.Image:
        """Render the framebuffer to a scaled PIL Image."""
        return framebuffer.to_image(
            zoom=self.scale, on_color=self.fg_color, off_color=self.bg_color
        )

    def save_display(self, framebuffer: Framebuffer, filename: str) -> None:
        """Save display to image file."""
        img = self.render_display(framebuffer)
        img.save(filename)

    def create_debug_image(self, emulator: "Chip8Emulator") -> Image.Image:
        """Create a debug image with the display and register state."""
        display_img = self.render_display(emulator.display)

        border = 10
        line_height = 14
        regs = emulator.registers.as_dict()
        lines = [
            " ".join(f"V{idx:X}={regs[f'v{idx:x}']:02X}" for idx in range(0, 8)),
            " ".join(f"V{idx:X}={regs[f'v{idx:x}']:02X}" for idx in range(8, 16)),
            f"PC={regs['pc']:04X}  I={regs['i']:04X}  SP={regs['sp']:X}",
            f"DT={regs['delay']:02X}  ST={regs['sound']:02X}  "
            f"quirks={emulator.settings.quirk_letters() or '-'}",
        ]
        text_height = len(lines) * line_height + border
        final_img = Image.new(
            "RGB",
            (display_img.width + 2 * border,
             display_img.height + 2 * border + text_height),
            (255, 255, 255),
        )
        final_img.paste(display_img, (border, border))

        draw = ImageDraw.Draw(final_img)
        font = ImageFont.load_default()
        text_y = display_img.height + border + border // 2
        for i, line in enumerate(lines):
            draw.text((border, text_y + i * line_height), line, fill=(0, 0, 0), font=font)
        return final_img

    def save_debug_image(self, emulator: "Chip8Emulator", filename: str) -> None:
        self.create_debug_image(emulator).save(filename)
