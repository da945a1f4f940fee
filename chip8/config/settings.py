"""Interpreter settings: quirk toggles and execution speed."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional, Union

from ..constants import DEFAULT_SPEED_HZ, TICK_RATE_HZ

logger = logging.getLogger(__name__)

# CLI quirk letters, as accepted by ``--quirks``.
QUIRK_LETTERS = {
    "j": "jumping",
    "m": "memory",
    "s": "shifting",
    "r": "vf_reset",
}


def cycles_for_speed(speed_hz: int) -> int:
    """Instructions per 60 Hz tick for a target instruction rate."""
    return max(1, math.ceil(abs(speed_hz) / TICK_RATE_HZ))


@dataclass
class Settings:
    """Behavioural switches consulted by individual instruction handlers.

    Attributes:
        vf_reset: 8XY1/8XY2/8XY3 clear VF.
        memory: FX55/FX65 advance I by X + 1.
        shifting: 8XY6/8XYE shift VX in place instead of reading VY.
        jumping: BNNN adds VX (X = high nibble of NNN) instead of V0.
        cycles: Instructions executed per tick, at least 1.
        index_overflow: FX1E sets VF when I + VX exceeds 0xFFFF. Off by
            default, so FX1E never touches VF.
    """

    vf_reset: bool = False
    memory: bool = False
    shifting: bool = False
    jumping: bool = False
    cycles: int = cycles_for_speed(DEFAULT_SPEED_HZ)
    index_overflow: bool = False

    def __setattr__(self, name: str, value) -> None:
        if name == "cycles":
            value = max(1, int(value))
        super().__setattr__(name, value)

    @classmethod
    def from_quirks(cls, letters: str = "", speed: Optional[int] = None) -> "Settings":
        """Build settings from quirk letters (``"jmsr"``) and a speed in Hz."""
        settings = cls()
        for letter in letters:
            attr = QUIRK_LETTERS.get(letter.lower())
            if attr is None:
                logger.warning("Ignoring unknown quirk letter %r", letter)
                continue
            setattr(settings, attr, True)
        if speed is not None:
            settings.cycles = cycles_for_speed(speed)
        return settings

    def quirk_letters(self) -> str:
        return "".join(
            letter for letter, attr in QUIRK_LETTERS.items() if getattr(self, attr)
        )

    def toggle(self, name: str) -> bool:
        """Flip a boolean setting and return its new value."""
        attr = QUIRK_LETTERS.get(name, name)
        current = getattr(self, attr, None)
        if not isinstance(current, bool):
            raise ValueError(f"Unknown quirk: {name}")
        setattr(self, attr, not current)
        return not current

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return cls(**data)

    def save(self, path: Union[str, Path]) -> None:
        """Save settings to a JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Settings":
        """Load settings from a JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)
