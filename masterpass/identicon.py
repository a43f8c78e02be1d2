"""
MasterPass - Identicon

A tiny coloured glyph like "╔░╝⌚" computed from the full name and master
password. Showing it next to the password prompt lets the user notice a
typo in their master password without ever revealing the password itself.

No security property is claimed: the glyph has only a few thousand values.
Any failure gives NEUTRAL_IDENTICON instead of an error.
"""

import hashlib
import hmac
import logging
from enum import IntEnum
from typing import NamedTuple

logger = logging.getLogger(__name__)


LEFT_ARMS = ("╔", "╚", "╰", "═")
RIGHT_ARMS = ("╗", "╝", "╯", "═")
BODIES = ("█", "░", "▒", "▓", "☺", "☻")
ACCESSORIES = (
    "◈", "◎", "◐", "◑", "◒", "◓", "☀", "☁", "☂", "☃", "☄", "★", "☆", "☎", "☏", "⎈", "⌂", "☘", "☢", "☣",
    "☕", "⌚", "⌛", "⏰", "⚡", "⛄", "⛅", "☔", "♔", "♕", "♖", "♗", "♘", "♙", "♚", "♛", "♜", "♝", "♞", "♟",
    "♨", "♩", "♪", "♫", "⚐", "⚑", "⚔", "⚖", "⚙", "⚠", "⌘", "⏎", "✄", "✆", "✈", "✉", "✌",
)


class IdenticonColor(IntEnum):
    """ANSI terminal colours (foreground code is 30 + value)."""
    MONO = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7


class Identicon(NamedTuple):
    left_arm: str
    body: str
    right_arm: str
    accessory: str
    color: IdenticonColor

    def glyph(self) -> str:
        return self.left_arm + self.body + self.right_arm + self.accessory

    def render(self, colored: bool = False) -> str:
        """Glyph as text, optionally wrapped in ANSI colour codes."""
        if not colored or self.color == IdenticonColor.MONO:
            return self.glyph()
        return f"\x1b[{30 + int(self.color)}m{self.glyph()}\x1b[0m"


NEUTRAL_IDENTICON = Identicon("═", "░", "═", " ", IdenticonColor.MONO)


def identicon(identity: str, secret: str) -> Identicon:
    """
    Compute the identicon for a full name and master password.

    seed = HMAC-SHA256(key=master password, msg=full name)
        seed[0..3] → left arm, body, right arm, accessory
        seed[4]    → colour (1..7)
    """
    try:
        if not identity or not secret:
            return NEUTRAL_IDENTICON
        seed = hmac.new(secret.encode("utf-8"), identity.encode("utf-8"), hashlib.sha256).digest()
    except (AttributeError, TypeError, UnicodeError) as e:
        logger.debug("Identicon unavailable: %s", type(e).__name__)
        return NEUTRAL_IDENTICON

    return Identicon(
        left_arm=LEFT_ARMS[seed[0] % len(LEFT_ARMS)],
        body=BODIES[seed[1] % len(BODIES)],
        right_arm=RIGHT_ARMS[seed[2] % len(RIGHT_ARMS)],
        accessory=ACCESSORIES[seed[3] % len(ACCESSORIES)],
        color=IdenticonColor(seed[4] % 7 + 1),
    )
