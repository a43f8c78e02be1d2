"""
MasterPass - Errors

Every failure of the derivation pipeline is one of these. None of them is
retried: the functions are deterministic, so the same inputs fail the same way.

Messages never include the identity's secret, the master key or a seed.
"""


class MasterPasswordError(Exception):
    """Base class for all MasterPass errors."""


class InvalidInput(MasterPasswordError, ValueError):
    """Empty or malformed identity, secret, site name or option name."""


class InvalidCounter(InvalidInput):
    """Site counter outside 1..2**32-1."""


class InvalidKey(MasterPasswordError, ValueError):
    """Master key is missing, erased, wrong-sized or from another version."""


class InvalidTemplate(MasterPasswordError, ValueError):
    """No template set for the requested type/variant."""


class KeyDerivationFailed(MasterPasswordError, RuntimeError):
    """scrypt could not produce a key (usually memory exhaustion)."""


class UnknownVersion(MasterPasswordError, ValueError):
    """No frozen constant table for this algorithm version."""
