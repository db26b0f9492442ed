"""
Elliptic curve arithmetic on secp256k1.

The curve is  E: y² = x³ + 7  over  F_p.  Group operations are exposed
through the :class:`CurveGroup` capability so that the blind-signature
layer never depends on a concrete representation.  Two engines are
provided:

- :class:`Secp256k1` (this module) — pure Python.  Addition and
  doubling run in Jacobian coordinates  (X, Y, Z) ↦ (X/Z², Y/Z³), so a
  full scalar multiplication costs a single field inversion.
- :class:`~blindsecp256k1.libsecp.LibSecp256k1` — delegates to Bitcoin
  Core's libsecp256k1 through ``coincurve``.

Neither engine is hardened against timing side channels.

References
----------
- SEC 1 v2 §2.3.3–2.3.4  point encoding
- SEC 2 v2 §2.4.1        secp256k1 domain parameters
- Explicit-Formulas Database, short Weierstrass / Jacobian:
  add-2007-bl, dbl-2009-l
"""

from __future__ import annotations

import abc
from typing import Optional, Tuple

from .errors import InvalidPointError, PointNotOnCurveError
from .field import FIELD_PRIME, ORDER, mod_inverse, mod_sqrt

# ── secp256k1 constants ─────────────────────────────────────────────────
P = FIELD_PRIME
N = ORDER
A = 0
B = 7
GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8

COORD_BYTES = 32
COMPRESSED_BYTES = 33
UNCOMPRESSED_BYTES = 65

# Jacobian triple; Z == 0 encodes the identity.
_Jacobian = Tuple[int, int, int]
_JACOBIAN_INF: _Jacobian = (1, 1, 0)


# ── Point  (immutable affine value) ─────────────────────────────────────
class Point:
    """
    Affine point on secp256k1, or the point at infinity.

    Points are plain values: constructing one does **not** check the
    curve equation.  Use :meth:`CurveGroup.validate` on anything that
    comes from outside the process.
    """

    __slots__ = ("_x", "_y", "_inf")

    def __init__(self, x: int = 0, y: int = 0, *, infinity: bool = False):
        self._x = 0 if infinity else x
        self._y = 0 if infinity else y
        self._inf = infinity

    @classmethod
    def identity(cls) -> Point:
        """Point at infinity — additive identity."""
        return cls(infinity=True)

    @property
    def x(self) -> int:
        return self._x

    @property
    def y(self) -> int:
        return self._y

    def is_inf(self) -> bool:
        return self._inf

    # serialisation ----------------------------------------------------------
    def to_bytes(self, compressed: bool = True) -> bytes:
        """SEC 1 encoding; the identity encodes as a single zero byte."""
        if self._inf:
            return b"\x00"
        x = self._x.to_bytes(COORD_BYTES, "big")
        if compressed:
            return (b"\x03" if self._y & 1 else b"\x02") + x
        return b"\x04" + x + self._y.to_bytes(COORD_BYTES, "big")

    def __eq__(self, o: object) -> bool:
        if not isinstance(o, Point):
            return False
        if self._inf or o._inf:
            return self._inf and o._inf
        return self._x == o._x and self._y == o._y

    def __hash__(self) -> int:
        return hash((self._x, self._y, self._inf))

    def __repr__(self) -> str:
        if self._inf:
            return "Point(∞)"
        return f"Point(0x{self._x:064x})"[:42] + "…)"


G = Point(GX, GY)


# ── capability ──────────────────────────────────────────────────────────
class CurveGroup(abc.ABC):
    """
    Group law on secp256k1.

    Subclasses supply :meth:`add` and :meth:`multiply`; validation,
    negation and decoding are pure field arithmetic and shared.
    """

    name = "abstract"
    order = N
    generator = G

    def is_on_curve(self, point: Point) -> bool:
        """y² ≡ x³ + a·x + b (mod p).  The identity counts as valid."""
        if point.is_inf():
            return True
        x, y = point.x, point.y
        if not (0 <= x < P and 0 <= y < P):
            return False
        return (y * y - (x * x * x + A * x + B)) % P == 0

    def validate(self, x: int, y: int) -> Point:
        """Build a point from untrusted coordinates."""
        point = Point(x, y)
        if not self.is_on_curve(point):
            raise PointNotOnCurveError(x, y)
        return point

    def negate(self, point: Point) -> Point:
        if point.is_inf():
            return point
        return Point(point.x, (-point.y) % P)

    def decode(self, data: bytes) -> Point:
        """Parse a SEC 1 compressed (33 B) or uncompressed (65 B) point."""
        if data == b"\x00":
            return Point.identity()
        prefix = data[:1]
        if len(data) == COMPRESSED_BYTES and prefix in (b"\x02", b"\x03"):
            x = int.from_bytes(data[1:], "big")
            if x >= P:
                raise InvalidPointError("x coordinate out of range")
            y = mod_sqrt(x * x * x + A * x + B, P)
            if y is None:
                raise InvalidPointError(f"no point with x = 0x{x:x}")
            if (y & 1) != (prefix == b"\x03"):
                y = P - y
            return self.validate(x, y)
        if len(data) == UNCOMPRESSED_BYTES and prefix == b"\x04":
            x = int.from_bytes(data[1:33], "big")
            y = int.from_bytes(data[33:], "big")
            return self.validate(x, y)
        raise InvalidPointError(
            f"unrecognised point encoding ({len(data)} bytes)"
        )

    def multiply_base(self, k: int) -> Point:
        """k · G."""
        return self.multiply(k, self.generator)

    @abc.abstractmethod
    def add(self, p1: Point, p2: Point) -> Point:
        """Group law  p1 + p2."""

    @abc.abstractmethod
    def multiply(self, k: int, point: Point) -> Point:
        """Scalar multiplication  k · point  (k taken modulo n)."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# ── pure-Python engine ──────────────────────────────────────────────────
class Secp256k1(CurveGroup):
    """Jacobian-coordinate implementation of :class:`CurveGroup`."""

    name = "python"

    def add(self, p1: Point, p2: Point) -> Point:
        if p1.is_inf():
            return p2
        if p2.is_inf():
            return p1
        if p1.x == p2.x:
            if p1.y != p2.y or p1.y == 0:
                # p2 == -p1
                return Point.identity()
            return _to_affine(_jacobian_double((p1.x, p1.y, 1)))
        return _to_affine(_jacobian_add((p1.x, p1.y, 1), (p2.x, p2.y, 1)))

    def multiply(self, k: int, point: Point) -> Point:
        """Double-and-add from the most significant bit."""
        k = int(k) % N
        if k == 0 or point.is_inf():
            return Point.identity()
        base: _Jacobian = (point.x, point.y, 1)
        acc = _JACOBIAN_INF
        for i in range(k.bit_length() - 1, -1, -1):
            acc = _jacobian_double(acc)
            if (k >> i) & 1:
                acc = _jacobian_add(acc, base)
        return _to_affine(acc)


def _to_affine(p: _Jacobian) -> Point:
    X, Y, Z = p
    if Z % P == 0:
        return Point.identity()
    z_inv = mod_inverse(Z, P)
    z_inv2 = (z_inv * z_inv) % P
    return Point((X * z_inv2) % P, (Y * z_inv2 * z_inv) % P)


def _jacobian_double(p: _Jacobian) -> _Jacobian:
    # dbl-2009-l  (a = 0)
    X1, Y1, Z1 = p
    if Z1 == 0 or Y1 == 0:
        return _JACOBIAN_INF
    a = (X1 * X1) % P
    b = (Y1 * Y1) % P
    c = (b * b) % P
    d = (2 * ((X1 + b) * (X1 + b) - a - c)) % P
    e = (3 * a) % P
    f = (e * e) % P
    X3 = (f - 2 * d) % P
    Y3 = (e * (d - X3) - 8 * c) % P
    Z3 = (2 * Y1 * Z1) % P
    return X3, Y3, Z3


def _jacobian_add(p1: _Jacobian, p2: _Jacobian) -> _Jacobian:
    # add-2007-bl
    X1, Y1, Z1 = p1
    X2, Y2, Z2 = p2
    if Z1 == 0:
        return p2
    if Z2 == 0:
        return p1
    z1z1 = (Z1 * Z1) % P
    z2z2 = (Z2 * Z2) % P
    u1 = (X1 * z2z2) % P
    u2 = (X2 * z1z1) % P
    s1 = (Y1 * Z2 * z2z2) % P
    s2 = (Y2 * Z1 * z1z1) % P
    h = (u2 - u1) % P
    r = (2 * (s2 - s1)) % P
    if h == 0:
        if r == 0:
            return _jacobian_double(p1)
        return _JACOBIAN_INF
    i = (4 * h * h) % P
    j = (h * i) % P
    v = (u1 * i) % P
    X3 = (r * r - j - 2 * v) % P
    Y3 = (r * (v - X3) - 2 * s1 * j) % P
    Z3 = (((Z1 + Z2) * (Z1 + Z2) - z1z1 - z2z2) * h) % P
    return X3, Y3, Z3


SECP256K1 = Secp256k1()


def require_point(
    group: CurveGroup,
    point: Optional[Point],
    what: str = "point",
    error: type = InvalidPointError,
) -> Point:
    """
    Check an externally supplied point: not ``None``, not the identity,
    on the curve.  Raises *error* (an ``InvalidPointError`` subclass).
    """
    if not isinstance(point, Point):
        raise error(f"{what} is not a curve point: {point!r}")
    if point.is_inf():
        raise error(f"{what} is the point at infinity")
    if not group.is_on_curve(point):
        raise error(f"{what} is not on secp256k1")
    return point
