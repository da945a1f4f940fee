"""Hexadecimal keypad state.

Layout of the COSMAC VIP hex keypad and the default host keyboard mapping::

    1 2 3 C        1 2 3 4
    4 5 6 D   <-   Q W E R
    7 8 9 E        A S D F
    A 0 B F        Z X C V   (Y also maps to A)
"""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from .constants import NUM_KEYS

KeyRef = Union[int, str]

KEY_NAMES: Dict[str, int] = {f"KEY_{i:X}": i for i in range(NUM_KEYS)}

DEFAULT_LAYOUT: Dict[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "y": 0xA,  # QWERTZ keyboards
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


def key_index(key: KeyRef) -> int:
    """Normalise a key reference (``0xA``, ``"KEY_A"`` or ``"A"``) to 0..15."""
    if isinstance(key, str):
        name = key.strip().upper()
        if name in KEY_NAMES:
            return KEY_NAMES[name]
        try:
            value = int(name, 16)
        except ValueError:
            raise ValueError(f"Unknown key {key!r}") from None
        if len(name) != 1:
            raise ValueError(f"Unknown key {key!r}")
        return value
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key index out of range: {key}")
    return int(key)


def key_for_host(host_key: str, layout: Optional[Dict[str, int]] = None) -> Optional[int]:
    """Translate a host key name to a keypad index, or None if unmapped."""
    return (layout or DEFAULT_LAYOUT).get(host_key.lower())


class Keypad:
    """Sixteen independent pressed/released flags.

    Written by the host between ticks, read by instruction handlers.
    """

    def __init__(self) -> None:
        self._keys: List[bool] = [False] * NUM_KEYS

    def press(self, key: KeyRef) -> None:
        self._keys[key_index(key)] = True

    def release(self, key: KeyRef) -> None:
        self._keys[key_index(key)] = False

    def set(self, key: KeyRef, pressed: bool) -> None:
        self._keys[key_index(key)] = bool(pressed)

    def clear(self) -> None:
        self._keys = [False] * NUM_KEYS

    def is_pressed(self, key: int) -> bool:
        # Register values above 0xF select by low nibble.
        return self._keys[key & 0xF]

    def first_pressed(self) -> Optional[int]:
        """Return the lowest pressed key index, if any."""
        for index, pressed in enumerate(self._keys):
            if pressed:
                return index
        return None

    def pressed_keys(self) -> List[int]:
        return [index for index, pressed in enumerate(self._keys) if pressed]

    def __len__(self) -> int:
        return NUM_KEYS

    def __getitem__(self, key: int) -> bool:
        return self._keys[key]
