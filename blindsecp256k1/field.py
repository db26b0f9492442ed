"""
Modular arithmetic over the secp256k1 prime field and group order.

Point coordinates are plain ``int`` values reduced modulo ``FIELD_PRIME``
with the ``mod_*`` helpers below; values modulo the group order are
wrapped in :class:`Scalar`, which keeps every result inside  Z_n.

References
----------
- SEC 2 v2 §2.4.1  secp256k1 domain parameters
"""

from __future__ import annotations

import secrets
from typing import Callable, Optional

from .errors import NoInverseError, RandomSourceError

# ── secp256k1 constants ─────────────────────────────────────────────────
ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
FIELD_PRIME = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
SCALAR_BYTES = 32

RandomBytes = Callable[[int], bytes]

DEFAULT_SAMPLING_ATTEMPTS = 128


# ── plain modular helpers ───────────────────────────────────────────────
def mod_add(x: int, y: int, modulus: int) -> int:
    return (x + y) % modulus


def mod_sub(x: int, y: int, modulus: int) -> int:
    return (x - y) % modulus


def mod_mul(x: int, y: int, modulus: int) -> int:
    return (x * y) % modulus


def mod_neg(x: int, modulus: int) -> int:
    return (-x) % modulus


def mod_inverse(x: int, modulus: int) -> int:
    """
    Inverse of *x* modulo *modulus* via the extended Euclidean algorithm.

    Raises ``NoInverseError`` when  gcd(x, modulus) ≠ 1, which for the
    prime moduli used here means only  x ≡ 0.
    """
    a = x % modulus
    if a == 0:
        raise NoInverseError("cannot invert zero")
    old_r, r = a, modulus
    old_s, s = 1, 0
    while r:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_s, s = s, old_s - q * s
    if old_r != 1:
        raise NoInverseError(f"0x{a:x} is not invertible (gcd={old_r})")
    return old_s % modulus


def mod_sqrt(x: int, p: int = FIELD_PRIME) -> Optional[int]:
    """
    Square root modulo a prime  p ≡ 3 (mod 4), or ``None`` if *x* is a
    non-residue.  Either root may be returned.
    """
    if p % 4 != 3:
        raise ValueError("mod_sqrt needs p ≡ 3 (mod 4)")
    x %= p
    y = pow(x, (p + 1) // 4, p)
    if (y * y) % p != x:
        return None
    return y


# ── Scalar  (Z_n arithmetic) ────────────────────────────────────────────
class Scalar:
    """Element of  Z_n  where *n* = ``ORDER``."""

    __slots__ = ("_v",)

    def __init__(self, value: int) -> None:
        self._v = value % ORDER

    # constructors -----------------------------------------------------------
    @classmethod
    def zero(cls) -> Scalar:
        return cls(0)

    @classmethod
    def one(cls) -> Scalar:
        return cls(1)

    @classmethod
    def random(
        cls,
        randbytes: Optional[RandomBytes] = None,
        max_attempts: int = DEFAULT_SAMPLING_ATTEMPTS,
    ) -> Scalar:
        """Uniform in [1, n-1] via rejection sampling."""
        draw = randbytes or secrets.token_bytes
        for _ in range(max_attempts):
            c = int.from_bytes(draw(SCALAR_BYTES), "big")
            if 0 < c < ORDER:
                return cls(c)
        raise RandomSourceError(
            f"no scalar in [1, n-1] after {max_attempts} draws"
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> Scalar:
        if len(data) != SCALAR_BYTES:
            raise ValueError(f"need {SCALAR_BYTES} bytes, got {len(data)}")
        v = int.from_bytes(data, "big")
        if v >= ORDER:
            raise ValueError("scalar out of range")
        return cls(v)

    @classmethod
    def from_bytes_reduce(cls, data: bytes, signed: bool = False) -> Scalar:
        """Hash-output safe: reduce arbitrary length modulo *n*."""
        return cls(int.from_bytes(data, "big", signed=signed))

    # serialisation ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        return self._v.to_bytes(SCALAR_BYTES, "big")

    @property
    def value(self) -> int:
        return self._v

    def is_zero(self) -> bool:
        return self._v == 0

    # arithmetic -------------------------------------------------------------
    def __add__(self, o: Scalar) -> Scalar:
        if not isinstance(o, Scalar):
            return NotImplemented
        return Scalar(mod_add(self._v, o._v, ORDER))

    def __sub__(self, o: Scalar) -> Scalar:
        if not isinstance(o, Scalar):
            return NotImplemented
        return Scalar(mod_sub(self._v, o._v, ORDER))

    def __mul__(self, o):
        if isinstance(o, Scalar):
            return Scalar(mod_mul(self._v, o._v, ORDER))
        if isinstance(o, int):
            return Scalar(mod_mul(self._v, o, ORDER))
        return NotImplemented

    def __rmul__(self, o):
        if isinstance(o, int):
            return Scalar(mod_mul(o, self._v, ORDER))
        return NotImplemented

    def __neg__(self) -> Scalar:
        return Scalar(mod_neg(self._v, ORDER))

    def __truediv__(self, o: Scalar) -> Scalar:
        if not isinstance(o, Scalar):
            return NotImplemented
        return self * o.inv()

    def __pow__(self, e: int) -> Scalar:
        if e < 0:
            return self.inv() ** (-e)
        return Scalar(pow(self._v, e, ORDER))

    def inv(self) -> Scalar:
        """Multiplicative inverse; raises ``NoInverseError`` for zero."""
        return Scalar(mod_inverse(self._v, ORDER))

    # comparison / hashing ---------------------------------------------------
    def __eq__(self, o: object) -> bool:
        if isinstance(o, Scalar):
            return self._v == o._v
        if isinstance(o, int):
            return self._v == o % ORDER
        return False

    def __hash__(self) -> int:
        return hash(self._v)

    def __bool__(self) -> bool:
        return self._v != 0

    def __int__(self) -> int:
        return self._v

    def __repr__(self) -> str:
        h = hex(self._v)
        return f"Scalar(0x{h[2:10]}…)" if len(h) > 14 else f"Scalar({h})"
