"""
Hash-to-scalar functions.

The blind-signature challenge is  e = R.x · H(m)  mod n, where *H* is any
function ``bytes -> Scalar``.  Two are provided:

``keccak256``  (default)
    Keccak-256 with the original (pre-SHA-3) padding, as used by
    Ethereum.  The 32-byte digest is read as a **signed** big-endian
    two's-complement integer and reduced modulo *n*, so digests with the
    top bit set map to  n − |v| mod n.  This keeps signatures compatible
    with JVM deployments that build the integer with
    ``new BigInteger(digest)``.

``sha256``
    BIP-340 tagged hash

        H_tag(x) = SHA-256( SHA-256(tag) ‖ SHA-256(tag) ‖ x )

    reduced modulo *n*.
"""

from __future__ import annotations

import hashlib
from typing import Callable, Dict

from Crypto.Hash import keccak

from .errors import ConfigError
from .field import Scalar

HashToScalar = Callable[[bytes], Scalar]

_TAG_MESSAGE = b"blindsecp256k1/v1/message"


def keccak256(data: bytes) -> bytes:
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


def keccak256_to_scalar(message: bytes) -> Scalar:
    """Keccak-256 digest, signed big-endian, reduced modulo *n*."""
    return Scalar.from_bytes_reduce(keccak256(message), signed=True)


def _tagged_hasher(tag: bytes):
    """Return a SHA-256 context pre-loaded with the BIP-340 tag prefix."""
    tag_hash = hashlib.sha256(tag).digest()
    h = hashlib.sha256()
    h.update(tag_hash)
    h.update(tag_hash)
    return h


def tagged_hash(tag: bytes, data: bytes) -> bytes:
    h = _tagged_hasher(tag)
    h.update(data)
    return h.digest()


def sha256_to_scalar(message: bytes) -> Scalar:
    """BIP-340 tagged SHA-256 of *message*, reduced modulo *n*."""
    return Scalar.from_bytes_reduce(tagged_hash(_TAG_MESSAGE, message))


HASHES: Dict[str, HashToScalar] = {
    "keccak256": keccak256_to_scalar,
    "sha256": sha256_to_scalar,
}

DEFAULT_HASH = "keccak256"


def get_hash_to_scalar(name: str) -> HashToScalar:
    try:
        return HASHES[name]
    except KeyError:
        raise ConfigError(
            f"unknown hash {name!r}; choose from {sorted(HASHES)}"
        ) from None
