"""
Blind Schnorr-style signatures on secp256k1.

Signer key  d,  public key  Y = d·G.  One signing session:

**Signer:**     k ←$ Z_n,  R' = k·G                      → send R'

**Requester:**  a, b ←$ Z_n*
                R      = a·R' + b·G
                m'     = a⁻¹ · (R.x mod n) · H(m)          → send m'

**Signer:**     s'     = d·m' + k                         → send s'

**Requester:**  s      = a·s' + b                 signature (s, R)

**Verifier:**   s·G  ==  R + (R.x · H(m))·Y

Correctness:  s = a(d·m' + k) + b = d·R.x·H(m) + (a·k + b), and
R = (a·k + b)·G, so  s·G = R + R.x·H(m)·Y.

The signer sees only  R'  and  m', which are independent of  (R, m)
because  a, b  are uniform.

The challenge is  R.x · H(m), not  H(R ‖ Y ‖ m)  as in BIP-340, so it
binds neither R.y nor the public key.  Keep it that way for
compatibility; it is weaker against malleability than a full Schnorr
challenge.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .curve import (
    COMPRESSED_BYTES,
    SECP256K1,
    CurveGroup,
    Point,
    require_point,
)
from .errors import (
    BlindedMessageOutOfRangeError,
    InvalidCommitmentError,
    InvalidPointError,
    InvariantViolationError,
    ZeroBlindedMessageError,
)
from .field import (
    DEFAULT_SAMPLING_ATTEMPTS,
    ORDER,
    SCALAR_BYTES,
    RandomBytes,
    Scalar,
)
from .hash import HashToScalar, keccak256_to_scalar

logger = logging.getLogger(__name__)

SIGNATURE_BYTES = COMPRESSED_BYTES + SCALAR_BYTES


# ── data structures ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class BlindingFactors:
    """Requester secrets  (a, b).  Never sent; needed to unblind."""

    a: Scalar
    b: Scalar

    def __repr__(self) -> str:
        return "BlindingFactors(…)"


@dataclass(frozen=True)
class BlindedRequest:
    """
    Requester output of :func:`blind`.

    Only :attr:`blind_m` goes to the signer; :attr:`R` stays with the
    requester and becomes part of the final signature.
    """

    R: Point
    blind_m: Scalar

    def to_bytes(self) -> bytes:
        """Serialise to 65 bytes: compressed R (33) + m' (32)."""
        return self.R.to_bytes(compressed=True) + self.blind_m.to_bytes()

    @classmethod
    def from_bytes(
        cls, data: bytes, group: Optional[CurveGroup] = None,
    ) -> BlindedRequest:
        if len(data) != SIGNATURE_BYTES:
            raise ValueError(
                f"expected {SIGNATURE_BYTES} bytes, got {len(data)}"
            )
        R = (group or SECP256K1).decode(data[:COMPRESSED_BYTES])
        blind_m = _check_blind_m(
            int.from_bytes(data[COMPRESSED_BYTES:], "big")
        )
        return cls(R=R, blind_m=blind_m)


@dataclass(frozen=True)
class Signature:
    """
    Final unblinded signature  (s, R).

    Verifiable by anyone holding the signer's public key:
        s·G  ==  R + (R.x · H(m))·Y.
    """

    s: Scalar
    R: Point

    def to_bytes(self) -> bytes:
        """Serialise to 65 bytes: compressed R (33) + s (32)."""
        return self.R.to_bytes(compressed=True) + self.s.to_bytes()

    @classmethod
    def from_bytes(
        cls, data: bytes, group: Optional[CurveGroup] = None,
    ) -> Signature:
        if len(data) != SIGNATURE_BYTES:
            raise ValueError(
                f"expected {SIGNATURE_BYTES} bytes, got {len(data)}"
            )
        R = (group or SECP256K1).decode(data[:COMPRESSED_BYTES])
        s = Scalar.from_bytes(data[COMPRESSED_BYTES:])
        return cls(s=s, R=R)


ScalarLike = Union[Scalar, int]


# ── requester ───────────────────────────────────────────────────────────

def blind(
    commitment_point: Point,
    message: bytes,
    *,
    group: Optional[CurveGroup] = None,
    hash_to_scalar: HashToScalar = keccak256_to_scalar,
    randbytes: Optional[RandomBytes] = None,
    max_attempts: int = DEFAULT_SAMPLING_ATTEMPTS,
) -> Tuple[BlindingFactors, BlindedRequest]:
    """
    Blind *message* against the signer's commitment  R'.

    Returns the private factors  (a, b)  and the request  (R, m').

    Raises
    ------
    InvalidCommitmentError
        R' is not a valid, non-identity curve point.
    ZeroBlindedMessageError
        m' came out zero (R.x ≡ 0 or H(m) ≡ 0 mod n).  Call again for
        fresh factors; a zero hash never recovers.
    """
    group = group or SECP256K1
    R_ = require_point(
        group, commitment_point, "commitment R'", InvalidCommitmentError,
    )

    a = Scalar.random(randbytes, max_attempts)
    b = Scalar.random(randbytes, max_attempts)

    # R = a·R' + b·G
    R = group.add(group.multiply(a.value, R_), group.multiply_base(b.value))
    if R.is_inf() or not group.is_on_curve(R):
        raise InvariantViolationError("blinded nonce R is not a valid point")

    h = hash_to_scalar(message)
    blind_m = a.inv() * Scalar(R.x) * h
    if blind_m.is_zero():
        raise ZeroBlindedMessageError("blinded message is zero")

    return BlindingFactors(a=a, b=b), BlindedRequest(R=R, blind_m=blind_m)


def unblind(a: Scalar, b: Scalar, blind_sig: ScalarLike) -> Scalar:
    """s = a·s' + b."""
    return a * Scalar(int(blind_sig)) + b


# ── signer ──────────────────────────────────────────────────────────────

def _check_blind_m(blind_m: ScalarLike) -> Scalar:
    value = int(blind_m)
    if not 0 <= value < ORDER:
        raise BlindedMessageOutOfRangeError(
            "blinded message is not inside the scalar field"
        )
    if value == 0:
        raise ZeroBlindedMessageError("blinded message can not be 0")
    return Scalar(value)


def blind_sign(
    private_key: Scalar,
    nonce: Scalar,
    blind_m: ScalarLike,
) -> Scalar:
    """
    s' = d·m' + k.

    *nonce* must be the  k  behind the commitment sent in this session,
    and must never be used again.
    """
    m = _check_blind_m(blind_m)
    return private_key * m + nonce


# ── verification ────────────────────────────────────────────────────────

def challenge(
    R: Point,
    message: bytes,
    hash_to_scalar: HashToScalar = keccak256_to_scalar,
) -> Scalar:
    """e = (R.x mod n) · H(m)."""
    return Scalar(R.x) * hash_to_scalar(message)


def verify(
    s: ScalarLike,
    R: Point,
    message: bytes,
    public_key: Point,
    *,
    group: Optional[CurveGroup] = None,
    hash_to_scalar: HashToScalar = keccak256_to_scalar,
) -> bool:
    """
    Check  s·G == R + e·Y  with  e = R.x · H(m).

    Returns ``False`` for any mismatch.  Raises ``InvalidPointError``
    only when *R* or *public_key* is not a valid curve point.
    """
    group = group or SECP256K1
    require_point(group, R, "signature nonce R", InvalidPointError)
    require_point(group, public_key, "public key", InvalidPointError)

    s_val = int(s)
    if not 0 <= s_val < ORDER:
        logger.debug("verify: s outside [0, n)")
        return False

    e = challenge(R, message, hash_to_scalar)
    left = group.multiply_base(s_val)
    right = group.add(R, group.multiply(e.value, public_key))
    ok = left == right
    logger.debug("verify: %s", "valid" if ok else "mismatch")
    return ok


def verify_signature(
    public_key: Point,
    message: bytes,
    sig: Signature,
    *,
    group: Optional[CurveGroup] = None,
    hash_to_scalar: HashToScalar = keccak256_to_scalar,
) -> bool:
    """:func:`verify` on a :class:`Signature` value."""
    return verify(
        sig.s, sig.R, message, public_key,
        group=group, hash_to_scalar=hash_to_scalar,
    )
