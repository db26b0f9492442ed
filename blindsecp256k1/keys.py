"""
Signer key material: long-term key pairs and per-session nonces.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .curve import SECP256K1, CurveGroup, Point
from .field import DEFAULT_SAMPLING_ATTEMPTS, RandomBytes, Scalar


@dataclass(frozen=True)
class KeyPair:
    """Signer identity:  public_key = private_key · G."""

    public_key: Point
    private_key: Scalar

    def __repr__(self) -> str:
        return f"KeyPair(public_key={self.public_key!r})"


@dataclass(frozen=True)
class Commitment:
    """
    Nonce  k  and its commitment  R' = k · G.

    *k* never leaves the signer; only :attr:`point` is sent.  One
    commitment per signing session.
    """

    nonce: Scalar
    point: Point

    def __repr__(self) -> str:
        return f"Commitment(point={self.point!r})"


def generate_key_pair(
    group: Optional[CurveGroup] = None,
    randbytes: Optional[RandomBytes] = None,
    max_attempts: int = DEFAULT_SAMPLING_ATTEMPTS,
) -> KeyPair:
    group = group or SECP256K1
    d = Scalar.random(randbytes, max_attempts)
    return KeyPair(public_key=group.multiply_base(d.value), private_key=d)


def generate_nonce_commitment(
    group: Optional[CurveGroup] = None,
    randbytes: Optional[RandomBytes] = None,
    max_attempts: int = DEFAULT_SAMPLING_ATTEMPTS,
) -> Commitment:
    """Fresh  (k, R' = k·G).  **Must** be called once per session."""
    group = group or SECP256K1
    k = Scalar.random(randbytes, max_attempts)
    return Commitment(nonce=k, point=group.multiply_base(k.value))
