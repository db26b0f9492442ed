"""
Session-level orchestration of the blind-signature protocol.

Provides role objects that enforce the message order and the
single-use nonce rule, plus a ``BlindSecp256k1`` facade bundling the
curve engine, hash and configuration.

Usage
-----
::

    from blindsecp256k1 import BlindSigner, Requester

    signer = BlindSigner.generate()
    requester = Requester(signer.public_key)

    session = signer.open_session()                     # Signer
    req = requester.blind(session.commitment_point, m)  # Requester
    blind_sig = session.sign(req.request.blind_m)       # Signer
    sig = req.finalize(blind_sig)                       # Requester

    assert requester.verify(m, sig)                      # anyone

Session lifecycle
-----------------
``INITIATED → BLINDED → PARTIALLY_SIGNED → FINALIZED → VERIFIED | REJECTED``

There is no rollback.  A failed step leaves the session unusable and
the requester must ask for a new commitment.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple

from .blind import (
    BlindedRequest,
    BlindingFactors,
    ScalarLike,
    Signature,
    blind as _blind,
    blind_sign as _blind_sign,
    unblind as _unblind,
    verify as _verify,
)
from .config import SchemeConfig, get_group
from .curve import CurveGroup, Point
from .errors import SessionStateError, ZeroBlindedMessageError
from .field import RandomBytes, Scalar
from .hash import HashToScalar, get_hash_to_scalar
from .keys import (
    Commitment,
    KeyPair,
    generate_key_pair as _generate_key_pair,
    generate_nonce_commitment as _generate_nonce_commitment,
)

logger = logging.getLogger(__name__)


class SessionState(Enum):
    INITIATED = auto()
    BLINDED = auto()
    PARTIALLY_SIGNED = auto()
    FINALIZED = auto()
    VERIFIED = auto()
    REJECTED = auto()


def _session_id() -> str:
    return secrets.token_hex(8)


# ── facade ──────────────────────────────────────────────────────────────

class BlindSecp256k1:
    """
    The full scheme behind one object.

    Every operation is also available as a module-level function in
    :mod:`blindsecp256k1.blind` / :mod:`blindsecp256k1.keys`; this class
    only fixes the engine, the hash and the sampling bounds once.
    """

    def __init__(
        self,
        config: Optional[SchemeConfig] = None,
        *,
        group: Optional[CurveGroup] = None,
        hash_to_scalar: Optional[HashToScalar] = None,
        randbytes: Optional[RandomBytes] = None,
    ) -> None:
        self.config = (config or SchemeConfig()).check()
        self.group = group or get_group(self.config.backend)
        self.hash_to_scalar = hash_to_scalar or get_hash_to_scalar(
            self.config.hash_name,
        )
        self._randbytes = randbytes

    @classmethod
    def from_env(cls) -> BlindSecp256k1:
        return cls(SchemeConfig.from_env())

    # ── keys ───────────────────────────────────────────────────────────

    def generate_key_pair(self) -> KeyPair:
        return _generate_key_pair(
            self.group, self._randbytes, self.config.max_sampling_attempts,
        )

    def generate_nonce_commitment(self) -> Commitment:
        return _generate_nonce_commitment(
            self.group, self._randbytes, self.config.max_sampling_attempts,
        )

    # ── protocol steps ─────────────────────────────────────────────────

    def blind(
        self, commitment_point: Point, message: bytes,
    ) -> Tuple[BlindingFactors, BlindedRequest]:
        return _blind(
            commitment_point,
            message,
            group=self.group,
            hash_to_scalar=self.hash_to_scalar,
            randbytes=self._randbytes,
            max_attempts=self.config.max_sampling_attempts,
        )

    def blind_with_retry(
        self, commitment_point: Point, message: bytes,
    ) -> Tuple[BlindingFactors, BlindedRequest]:
        """
        :meth:`blind`, re-drawing  (a, b)  on a zero blinded message up
        to ``config.max_blind_attempts`` times.
        """
        attempts = self.config.max_blind_attempts
        for attempt in range(1, attempts + 1):
            try:
                return self.blind(commitment_point, message)
            except ZeroBlindedMessageError:
                logger.debug(
                    "zero blinded message, re-blinding (%d/%d)",
                    attempt, attempts,
                )
                if attempt == attempts:
                    raise
        raise AssertionError("unreachable")

    @staticmethod
    def blind_sign(
        private_key: Scalar, nonce: Scalar, blind_m: ScalarLike,
    ) -> Scalar:
        return _blind_sign(private_key, nonce, blind_m)

    @staticmethod
    def unblind(a: Scalar, b: Scalar, blind_sig: ScalarLike) -> Scalar:
        return _unblind(a, b, blind_sig)

    def verify(
        self,
        s: ScalarLike,
        R: Point,
        message: bytes,
        public_key: Point,
    ) -> bool:
        return _verify(
            s, R, message, public_key,
            group=self.group, hash_to_scalar=self.hash_to_scalar,
        )

    def verify_signature(
        self, public_key: Point, message: bytes, sig: Signature,
    ) -> bool:
        return self.verify(sig.s, sig.R, message, public_key)

    def __repr__(self) -> str:
        return (
            f"BlindSecp256k1(backend={self.group.name}, "
            f"hash={self.config.hash_name})"
        )


# ── signer ──────────────────────────────────────────────────────────────

@dataclass
class SignerSession:
    """
    Signer side of one session.  Holds the secret nonce until
    :meth:`sign` consumes it.
    """

    _signer: BlindSigner = field(repr=False)
    _commitment: Optional[Commitment] = field(repr=False)
    commitment_point: Point
    session_id: str = field(default_factory=_session_id)
    state: SessionState = SessionState.INITIATED

    def sign(self, blind_m: ScalarLike) -> Scalar:
        """
        Return  s' = d·m' + k.  Callable exactly once; the nonce is
        erased whether or not signing succeeds.
        """
        if self._commitment is None:
            raise SessionStateError(
                f"session {self.session_id}: nonce already used"
            )
        nonce = self._commitment.nonce
        # k is consumed even if m' is rejected
        self._commitment = None
        try:
            blind_sig = _blind_sign(
                self._signer.key_pair.private_key, nonce, blind_m,
            )
        except ValueError:
            self.state = SessionState.REJECTED
            logger.debug(
                "signer session %s: blinded message rejected",
                self.session_id,
            )
            raise
        self.state = SessionState.PARTIALLY_SIGNED
        logger.debug("signer session %s: signed", self.session_id)
        return blind_sig


class BlindSigner:
    """
    Long-lived signer identity.

    Sessions are independent; any number may be open at once, each with
    its own nonce.
    """

    def __init__(
        self,
        key_pair: KeyPair,
        scheme: Optional[BlindSecp256k1] = None,
    ) -> None:
        self.key_pair = key_pair
        self.scheme = scheme or BlindSecp256k1()

    @classmethod
    def generate(cls, scheme: Optional[BlindSecp256k1] = None) -> BlindSigner:
        scheme = scheme or BlindSecp256k1()
        return cls(scheme.generate_key_pair(), scheme)

    @property
    def public_key(self) -> Point:
        return self.key_pair.public_key

    def open_session(self) -> SignerSession:
        """Draw a fresh nonce and return the session holding it."""
        commitment = self.scheme.generate_nonce_commitment()
        session = SignerSession(
            _signer=self,
            _commitment=commitment,
            commitment_point=commitment.point,
        )
        logger.debug("signer session %s: opened", session.session_id)
        return session


# ── requester ───────────────────────────────────────────────────────────

@dataclass
class RequesterSession:
    """Requester side of one session, after blinding."""

    _requester: Requester = field(repr=False)
    _factors: Optional[BlindingFactors] = field(repr=False)
    message: bytes
    request: BlindedRequest
    session_id: str = field(default_factory=_session_id)
    state: SessionState = SessionState.BLINDED
    signature: Optional[Signature] = None

    def finalize(self, blind_sig: ScalarLike) -> Signature:
        """
        Unblind  s'  into  (s, R)  and check it against the signer's key.

        Raises ``SessionStateError`` if called twice or if the signer's
        answer does not verify (state becomes ``REJECTED``).
        """
        if self._factors is None:
            raise SessionStateError(
                f"session {self.session_id}: already {self.state.name}"
            )
        factors = self._factors
        self._factors = None
        self.state = SessionState.PARTIALLY_SIGNED

        s = _unblind(factors.a, factors.b, blind_sig)
        sig = Signature(s=s, R=self.request.R)
        self.state = SessionState.FINALIZED

        if not self._requester.verify(self.message, sig):
            self.state = SessionState.REJECTED
            logger.warning(
                "requester session %s: signer returned an invalid "
                "blind signature", self.session_id,
            )
            raise SessionStateError(
                f"session {self.session_id}: unblinded signature "
                "does not verify"
            )

        self.state = SessionState.VERIFIED
        self.signature = sig
        logger.debug("requester session %s: verified", self.session_id)
        return sig


class Requester:
    """Party that wants a signature on a message the signer must not see."""

    def __init__(
        self,
        signer_public_key: Point,
        scheme: Optional[BlindSecp256k1] = None,
    ) -> None:
        self.scheme = scheme or BlindSecp256k1()
        self.signer_public_key = signer_public_key

    def blind(self, commitment_point: Point, message: bytes) -> RequesterSession:
        """
        Blind *message* against the signer's commitment.  Send
        ``session.request.blind_m`` to the signer.
        """
        factors, request = self.scheme.blind_with_retry(
            commitment_point, message,
        )
        session = RequesterSession(
            _requester=self,
            _factors=factors,
            message=message,
            request=request,
        )
        logger.debug("requester session %s: blinded", session.session_id)
        return session

    def verify(self, message: bytes, sig: Signature) -> bool:
        return self.scheme.verify_signature(
            self.signer_public_key, message, sig,
        )
