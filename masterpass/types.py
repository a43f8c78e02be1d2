"""
MasterPass - Site Types and Variants

A site type names the shape of the output (which template set to use).
A site variant names its purpose (password, login name or security answer)
and selects the HMAC scope tag, so the same site yields unrelated outputs.

Names accepted on the command line are resolved here with one lookup table
per enum. Unknown names are an error, never a silent default.
"""

from enum import Enum
from typing import Dict, FrozenSet

from .errors import InvalidInput


class SiteType(Enum):
    MAXIMUM = "maximum"   # 20 characters, contains symbols
    LONG = "long"         # copy-friendly, 14 characters, contains symbols
    MEDIUM = "medium"     # copy-friendly, 8 characters, contains symbols
    BASIC = "basic"       # 8 characters, no symbols
    SHORT = "short"       # copy-friendly, 4 characters, no symbols
    PIN = "pin"           # 4 digits
    NAME = "name"         # 9 letter name
    PHRASE = "phrase"     # 20 character sentence


class SiteVariant(Enum):
    PASSWORD = "password"
    LOGIN = "login"
    ANSWER = "answer"


_TYPE_NAMES: Dict[str, SiteType] = {
    "x": SiteType.MAXIMUM, "max": SiteType.MAXIMUM, "maximum": SiteType.MAXIMUM,
    "l": SiteType.LONG, "long": SiteType.LONG,
    "m": SiteType.MEDIUM, "med": SiteType.MEDIUM, "medium": SiteType.MEDIUM,
    "b": SiteType.BASIC, "basic": SiteType.BASIC,
    "s": SiteType.SHORT, "short": SiteType.SHORT,
    "i": SiteType.PIN, "pin": SiteType.PIN,
    "n": SiteType.NAME, "name": SiteType.NAME,
    "p": SiteType.PHRASE, "phrase": SiteType.PHRASE,
}

_VARIANT_NAMES: Dict[str, SiteVariant] = {
    "p": SiteVariant.PASSWORD, "password": SiteVariant.PASSWORD,
    "l": SiteVariant.LOGIN, "login": SiteVariant.LOGIN,
    "a": SiteVariant.ANSWER, "answer": SiteVariant.ANSWER,
}

_DEFAULT_TYPES: Dict[SiteVariant, SiteType] = {
    SiteVariant.PASSWORD: SiteType.LONG,
    SiteVariant.LOGIN: SiteType.NAME,
    SiteVariant.ANSWER: SiteType.PHRASE,
}

# Every generated type may be used for every variant (e.g. a PIN answer).
VARIANT_TYPES: Dict[SiteVariant, FrozenSet[SiteType]] = {
    variant: frozenset(SiteType) for variant in SiteVariant
}


def type_with_name(name: str) -> SiteType:
    """Resolve a short or long type name ("x", "long", "PIN", ...)."""
    try:
        return _TYPE_NAMES[name.strip().lower()]
    except (KeyError, AttributeError):
        raise InvalidInput(f"Not a generated type name: {name!r}") from None


def variant_with_name(name: str) -> SiteVariant:
    """Resolve a short or long variant name ("p", "login", ...)."""
    try:
        return _VARIANT_NAMES[name.strip().lower()]
    except (KeyError, AttributeError):
        raise InvalidInput(f"Not a variant name: {name!r}") from None


def default_type(variant: SiteVariant) -> SiteType:
    """Type used when the caller names a variant but no type."""
    return _DEFAULT_TYPES[variant]
