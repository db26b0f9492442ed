"""
Session and facade tests
"""

import logging

import pytest

from blindsecp256k1 import (
    BlindSecp256k1,
    BlindSigner,
    Requester,
    SchemeConfig,
    SessionState,
)
from blindsecp256k1.curve import Point
from blindsecp256k1.errors import (
    ConfigError,
    InvalidCommitmentError,
    SessionStateError,
    ZeroBlindedMessageError,
)
from blindsecp256k1.field import Scalar
from blindsecp256k1.libsecp import LibSecp256k1


class TestFacade:
    """BlindSecp256k1 end to end."""

    def test_literal_scenario(self, scheme):
        m = "test".encode("utf-8")
        kp = scheme.generate_key_pair()
        com = scheme.generate_nonce_commitment()

        factors, req = scheme.blind(com.point, m)
        blind_sig = scheme.blind_sign(kp.private_key, com.nonce, req.blind_m)
        s = scheme.unblind(factors.a, factors.b, blind_sig)

        assert scheme.verify(s, req.R, m, kp.public_key) is True
        assert scheme.verify(s, req.R, b"other", kp.public_key) is False

    def test_hash_variants(self, any_scheme):
        kp = any_scheme.generate_key_pair()
        com = any_scheme.generate_nonce_commitment()
        factors, req = any_scheme.blind(com.point, b"hash")
        s = any_scheme.unblind(
            factors.a,
            factors.b,
            any_scheme.blind_sign(kp.private_key, com.nonce, req.blind_m),
        )
        assert any_scheme.verify(s, req.R, b"hash", kp.public_key)

    def test_libsecp_backend(self):
        scheme = BlindSecp256k1(SchemeConfig(backend="libsecp256k1"))
        assert isinstance(scheme.group, LibSecp256k1)
        kp = scheme.generate_key_pair()
        com = scheme.generate_nonce_commitment()
        factors, req = scheme.blind(com.point, b"fast")
        s = scheme.unblind(
            factors.a,
            factors.b,
            scheme.blind_sign(kp.private_key, com.nonce, req.blind_m),
        )
        assert scheme.verify(s, req.R, b"fast", kp.public_key)
        # and the pure-Python engine agrees
        assert BlindSecp256k1().verify(s, req.R, b"fast", kp.public_key)

    def test_bad_config(self):
        with pytest.raises(ConfigError):
            BlindSecp256k1(SchemeConfig(backend="openssl"))

    def test_blind_with_retry_gives_up(self):
        scheme = BlindSecp256k1(
            SchemeConfig(max_blind_attempts=3),
            hash_to_scalar=lambda m: Scalar.zero(),
        )
        com = scheme.generate_nonce_commitment()
        with pytest.raises(ZeroBlindedMessageError):
            scheme.blind_with_retry(com.point, b"m")

    def test_repr(self, scheme):
        assert "python" in repr(scheme)
        assert "keccak256" in repr(scheme)


class TestSessions:
    """BlindSigner / Requester state machine."""

    @pytest.fixture
    def signer(self, scheme):
        return BlindSigner.generate(scheme)

    @pytest.fixture
    def requester(self, signer, scheme):
        return Requester(signer.public_key, scheme)

    def test_full_flow(self, signer, requester):
        session = signer.open_session()
        assert session.state is SessionState.INITIATED

        req = requester.blind(session.commitment_point, b"vote")
        assert req.state is SessionState.BLINDED

        blind_sig = session.sign(req.request.blind_m)
        assert session.state is SessionState.PARTIALLY_SIGNED

        sig = req.finalize(blind_sig)
        assert req.state is SessionState.VERIFIED
        assert req.signature == sig
        assert requester.verify(b"vote", sig)
        assert not requester.verify(b"veto", sig)

    def test_nonce_single_use(self, signer, requester):
        session = signer.open_session()
        req = requester.blind(session.commitment_point, b"m")
        session.sign(req.request.blind_m)
        with pytest.raises(SessionStateError):
            session.sign(req.request.blind_m)

    def test_nonce_cleared_after_rejected_input(self, signer):
        session = signer.open_session()
        with pytest.raises(ZeroBlindedMessageError):
            session.sign(0)
        assert session.state is SessionState.REJECTED
        with pytest.raises(SessionStateError):
            session.sign(5)

    def test_sessions_use_distinct_nonces(self, signer):
        a = signer.open_session()
        b = signer.open_session()
        assert a.commitment_point != b.commitment_point
        assert a.session_id != b.session_id

    def test_finalize_once(self, signer, requester):
        session = signer.open_session()
        req = requester.blind(session.commitment_point, b"m")
        blind_sig = session.sign(req.request.blind_m)
        req.finalize(blind_sig)
        with pytest.raises(SessionStateError):
            req.finalize(blind_sig)

    def test_bad_signer_answer_rejected(self, signer, requester, caplog):
        session = signer.open_session()
        req = requester.blind(session.commitment_point, b"m")
        blind_sig = session.sign(req.request.blind_m)
        with caplog.at_level(logging.WARNING, logger="blindsecp256k1"):
            with pytest.raises(SessionStateError):
                req.finalize(blind_sig + Scalar.one())
        assert req.state is SessionState.REJECTED
        assert req.signature is None
        assert "invalid blind signature" in caplog.text

    def test_wrong_signer_key(self, signer, scheme):
        other = BlindSigner.generate(scheme)
        requester = Requester(other.public_key, scheme)
        session = signer.open_session()
        req = requester.blind(session.commitment_point, b"m")
        with pytest.raises(SessionStateError):
            req.finalize(session.sign(req.request.blind_m))

    def test_bad_commitment(self, requester):
        with pytest.raises(InvalidCommitmentError):
            requester.blind(Point(10, 10), b"m")

    def test_secrets_not_in_repr(self, signer, requester):
        session = signer.open_session()
        req = requester.blind(session.commitment_point, b"m")
        assert "nonce" not in repr(session)
        assert "_factors" not in repr(req)
