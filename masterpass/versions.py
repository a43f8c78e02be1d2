"""
MasterPass - Frozen Algorithm Tables

These tables ARE the algorithm. Once a version is released its entry must
never change, or every password ever generated with it changes too.
New behaviour gets a new version number.

Version history:
    0 - Initial release. Seed bytes were read as sign-extended 16-bit
        big-endian values; all lengths counted in characters.
    1 - Seed bytes read as plain unsigned bytes.
    2 - Site name (and context) length counted in UTF-8 bytes.
    3 - Full name length counted in UTF-8 bytes as well. (current)

For ASCII-only names and sites, versions 1, 2 and 3 give identical results.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from .errors import UnknownVersion
from .types import SiteType, SiteVariant


# =============================================================================
# Shared Constants
# =============================================================================

MASTER_KEY_SIZE = 64     # 512-bit master key
SEED_SIZE = 32           # HMAC-SHA256 digest

# Length units / seed reading rules
CHARACTERS = "characters"
BYTES = "bytes"
SEED_SIGNED_SHORT = "signed-short"
SEED_UNSIGNED_BYTE = "unsigned-byte"

SCOPE_PASSWORD = b"com.lyndir.masterpassword"
SCOPE_LOGIN = b"com.lyndir.masterpassword.login"
SCOPE_ANSWER = b"com.lyndir.masterpassword.answer"


# =============================================================================
# Templates and Character Classes
# =============================================================================

TEMPLATES: Mapping[SiteType, Tuple[str, ...]] = MappingProxyType({
    SiteType.MAXIMUM: (
        "anoxxxxxxxxxxxxxxxxx",
        "axxxxxxxxxxxxxxxxxno",
    ),
    SiteType.LONG: (
        "CvcvnoCvcvCvcv",
        "CvcvCvcvnoCvcv",
        "CvcvCvcvCvcvno",
        "CvccnoCvcvCvcv",
        "CvccCvcvnoCvcv",
        "CvccCvcvCvcvno",
        "CvcvnoCvccCvcv",
        "CvcvCvccnoCvcv",
        "CvcvCvccCvcvno",
        "CvcvnoCvcvCvcc",
        "CvcvCvcvnoCvcc",
        "CvcvCvcvCvccno",
        "CvccnoCvccCvcv",
        "CvccCvccnoCvcv",
        "CvccCvccCvcvno",
        "CvcvnoCvccCvcc",
        "CvcvCvccnoCvcc",
        "CvcvCvccCvccno",
        "CvccnoCvcvCvcc",
        "CvccCvcvnoCvcc",
        "CvccCvcvCvccno",
    ),
    SiteType.MEDIUM: (
        "CvcnoCvc",
        "CvcCvcno",
    ),
    SiteType.BASIC: (
        "aaanaaan",
        "aannaaan",
        "aaannaaa",
    ),
    SiteType.SHORT: (
        "Cvcn",
    ),
    SiteType.PIN: (
        "nnnn",
    ),
    SiteType.NAME: (
        "cvccvcvcv",
    ),
    SiteType.PHRASE: (
        "cvcc cvc cvccvcv cvc",
        "cvc cvccvcvcv cvcv",
        "cv cvccv cvc cvcvccv",
    ),
})

CHARACTER_CLASSES: Mapping[str, str] = MappingProxyType({
    "V": "AEIOU",
    "C": "BCDFGHJKLMNPQRSTVWXYZ",
    "v": "aeiou",
    "c": "bcdfghjklmnpqrstvwxyz",
    "A": "AEIOUBCDFGHJKLMNPQRSTVWXYZ",
    "a": "AEIOUaeiouBCDFGHJKLMNPQRSTVWXYZbcdfghjklmnpqrstvwxyz",
    "n": "0123456789",
    "o": "@&%?,=[]_:-+*$#!'^~;()/.",
    "x": "AEIOUaeiouBCDFGHJKLMNPQRSTVWXYZbcdfghjklmnpqrstvwxyz0123456789!@#$%^&*()",
    " ": " ",
})


# =============================================================================
# Per-Version Parameters
# =============================================================================

@dataclass(frozen=True)
class AlgorithmParams:
    """Everything that may differ between algorithm versions."""
    version: int
    scrypt_n: int
    scrypt_r: int
    scrypt_p: int
    key_size: int
    key_scope: bytes
    scopes: Mapping[SiteVariant, bytes]
    name_length: str        # CHARACTERS or BYTES
    site_length: str        # CHARACTERS or BYTES (also used for context)
    seed_reading: str       # SEED_SIGNED_SHORT or SEED_UNSIGNED_BYTE
    templates: Mapping[SiteType, Tuple[str, ...]]
    classes: Mapping[str, str]


_SCOPES = MappingProxyType({
    SiteVariant.PASSWORD: SCOPE_PASSWORD,
    SiteVariant.LOGIN: SCOPE_LOGIN,
    SiteVariant.ANSWER: SCOPE_ANSWER,
})


def _params(version: int, name_length: str, site_length: str, seed_reading: str) -> AlgorithmParams:
    # scrypt cost is identical for every released version: ~32 MB, N=2^15
    return AlgorithmParams(
        version=version,
        scrypt_n=32768,
        scrypt_r=8,
        scrypt_p=2,
        key_size=MASTER_KEY_SIZE,
        key_scope=SCOPE_PASSWORD,
        scopes=_SCOPES,
        name_length=name_length,
        site_length=site_length,
        seed_reading=seed_reading,
        templates=TEMPLATES,
        classes=CHARACTER_CLASSES,
    )


_ALGORITHMS: Dict[int, AlgorithmParams] = {
    0: _params(0, CHARACTERS, CHARACTERS, SEED_SIGNED_SHORT),
    1: _params(1, CHARACTERS, CHARACTERS, SEED_UNSIGNED_BYTE),
    2: _params(2, CHARACTERS, BYTES, SEED_UNSIGNED_BYTE),
    3: _params(3, BYTES, BYTES, SEED_UNSIGNED_BYTE),
}

ALGORITHMS: Mapping[int, AlgorithmParams] = MappingProxyType(_ALGORITHMS)

FIRST_VERSION = min(ALGORITHMS)
CURRENT_VERSION = max(ALGORITHMS)


def params_for(version: int) -> AlgorithmParams:
    """
    Look up the frozen parameters for a version.

    Raises:
        UnknownVersion: no table exists (fails closed, never falls back)
    """
    if isinstance(version, bool):
        version = None
    try:
        return ALGORITHMS[version]
    except (KeyError, TypeError):
        raise UnknownVersion(
            f"Unknown algorithm version {version!r} "
            f"(supported: {FIRST_VERSION}..{CURRENT_VERSION})"
        ) from None


def measure(text: str, unit: str) -> int:
    """Length of text in the given unit (code points or UTF-8 bytes)."""
    if unit == CHARACTERS:
        return len(text)
    return len(text.encode("utf-8"))
