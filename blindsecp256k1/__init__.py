"""
blindsecp256k1: blind signatures on the secp256k1 curve.

A signer issues a signature on a message it never sees; the requester
ends up with a signature  (s, R)  that verifies under the signer's
public key and cannot be linked back to the signing session.

- **Curve engine** — pure-Python Jacobian arithmetic, or libsecp256k1
  through ``coincurve``
- **Protocol** — blind / blind_sign / unblind / verify with a
  ``R.x · H(m)`` challenge
- **Sessions** — single-use nonces and ordered protocol steps

Quick start
-----------
::

    from blindsecp256k1 import BlindSecp256k1

    scheme = BlindSecp256k1()
    keys = scheme.generate_key_pair()

    commitment = scheme.generate_nonce_commitment()         # signer
    factors, req = scheme.blind(commitment.point, b"test")  # requester
    s_prime = scheme.blind_sign(                             # signer
        keys.private_key, commitment.nonce, req.blind_m,
    )
    s = scheme.unblind(factors.a, factors.b, s_prime)        # requester

    assert scheme.verify(s, req.R, b"test", keys.public_key)
"""

__version__ = "2.0.0"

# ── core types ──────────────────────────────────────────────────────────
from .field import Scalar, ORDER, FIELD_PRIME
from .curve import CurveGroup, Point, Secp256k1, SECP256K1, G

# ── errors ──────────────────────────────────────────────────────────────
from .errors import (
    BlindSignatureError,
    CurveError,
    InvalidPointError,
    PointNotOnCurveError,
    InvalidCommitmentError,
    NoInverseError,
    InvariantViolationError,
    ZeroBlindedMessageError,
    BlindedMessageOutOfRangeError,
    SessionStateError,
    RandomSourceError,
    ConfigError,
)

# ── keys ────────────────────────────────────────────────────────────────
from .keys import (
    KeyPair,
    Commitment,
    generate_key_pair,
    generate_nonce_commitment,
)

# ── protocol ────────────────────────────────────────────────────────────
from .blind import (
    BlindingFactors,
    BlindedRequest,
    Signature,
    blind,
    blind_sign,
    unblind,
    verify,
    verify_signature,
)
from .protocol import (
    BlindSecp256k1,
    BlindSigner,
    Requester,
    SignerSession,
    RequesterSession,
    SessionState,
)

# ── hashing / configuration ─────────────────────────────────────────────
from .hash import (
    keccak256_to_scalar,
    sha256_to_scalar,
    get_hash_to_scalar,
)
from .config import SchemeConfig, LogConfig, get_group, configure_logging

__all__ = [
    # version
    "__version__",
    # core
    "Scalar", "ORDER", "FIELD_PRIME",
    "CurveGroup", "Point", "Secp256k1", "SECP256K1", "G",
    # errors
    "BlindSignatureError", "CurveError", "InvalidPointError",
    "PointNotOnCurveError", "InvalidCommitmentError", "NoInverseError",
    "InvariantViolationError", "ZeroBlindedMessageError",
    "BlindedMessageOutOfRangeError", "SessionStateError",
    "RandomSourceError", "ConfigError",
    # keys
    "KeyPair", "Commitment", "generate_key_pair",
    "generate_nonce_commitment",
    # protocol
    "BlindingFactors", "BlindedRequest", "Signature",
    "blind", "blind_sign", "unblind", "verify", "verify_signature",
    "BlindSecp256k1", "BlindSigner", "Requester",
    "SignerSession", "RequesterSession", "SessionState",
    # hashing / config
    "keccak256_to_scalar", "sha256_to_scalar", "get_hash_to_scalar",
    "SchemeConfig", "LogConfig", "get_group", "configure_logging",
]
