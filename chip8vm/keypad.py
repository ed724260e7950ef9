"""
16-key hex keypad.

Only one key is tracked at a time: the most recent press wins, and a
release only clears the latch when it is for the key being held.
"""

from typing import Optional

from .config import NUM_KEYS
from .errors import InvalidKeyError


def _check_key(key: int) -> int:
    if isinstance(key, bool) or not isinstance(key, int) or not 0 <= key < NUM_KEYS:
        raise InvalidKeyError(key)
    return key


class Keypad:

    def __init__(self):
        self.pressed: Optional[int] = None

    def set_key(self, key: Optional[int]):
        self.pressed = None if key is None else _check_key(key)

    def get_key(self) -> Optional[int]:
        return self.pressed

    def press(self, key: int):
        self.pressed = _check_key(key)

    def release(self, key: int):
        if self.is_pressed(_check_key(key)):
            self.pressed = None

    def is_pressed(self, key: int) -> bool:
        return self.pressed is not None and self.pressed == key
