"""
Exception hierarchy for blindsecp256k1.

Every error derives from :class:`BlindSignatureError` *and* from the
builtin a caller would naturally catch (``ValueError`` for bad input,
``ZeroDivisionError`` for a missing inverse, ``RuntimeError`` for misuse
or broken invariants).
"""

from __future__ import annotations


class BlindSignatureError(Exception):
    """Base class for all errors raised by this package."""


# ── curve / point errors ────────────────────────────────────────────────
class CurveError(BlindSignatureError, ValueError):
    """A curve-level input could not be used."""


class InvalidPointError(CurveError):
    """Point is malformed, off the curve, or the identity where not allowed."""


class PointNotOnCurveError(InvalidPointError):
    """Coordinates do not satisfy  y² = x³ + 7  (mod p)."""

    def __init__(self, x: int, y: int) -> None:
        super().__init__(f"point (0x{x:x}, 0x{y:x}) is not on secp256k1")
        self.x = x
        self.y = y


class InvalidCommitmentError(InvalidPointError):
    """Signer commitment  R'  is not a usable curve point."""


# ── arithmetic ──────────────────────────────────────────────────────────
class NoInverseError(BlindSignatureError, ZeroDivisionError):
    """Value shares a factor with the modulus (in practice: it is zero)."""


class InvariantViolationError(BlindSignatureError, RuntimeError):
    """Something that holds by construction did not hold."""


# ── blinded message ─────────────────────────────────────────────────────
class ZeroBlindedMessageError(BlindSignatureError, ValueError):
    """Blinded message is zero; re-blind with fresh factors."""


class BlindedMessageOutOfRangeError(BlindSignatureError, ValueError):
    """Blinded message is not inside  [0, n)."""


# ── misuse ──────────────────────────────────────────────────────────────
class SessionStateError(BlindSignatureError, RuntimeError):
    """Session step called out of order, or a nonce used twice."""


class RandomSourceError(BlindSignatureError, RuntimeError):
    """Random source failed to yield a usable scalar."""


class ConfigError(BlindSignatureError, ValueError):
    """Invalid configuration value."""
