"""
Configuration tests
"""

import logging

import pytest

from blindsecp256k1.config import (
    LogConfig,
    SchemeConfig,
    configure_logging,
    get_group,
)
from blindsecp256k1.curve import SECP256K1
from blindsecp256k1.errors import ConfigError
from blindsecp256k1.libsecp import LibSecp256k1


class TestSchemeConfig:
    """Tests for SchemeConfig."""

    def test_defaults_valid(self):
        assert SchemeConfig().validate() == []

    def test_validate_collects_errors(self):
        cfg = SchemeConfig(
            backend="gmp",
            hash_name="md5",
            max_sampling_attempts=0,
            max_blind_attempts=0,
            log=LogConfig(level="LOUD"),
        )
        assert len(cfg.validate()) == 5
        with pytest.raises(ConfigError):
            cfg.check()

    def test_save_load(self, tmp_path):
        path = str(tmp_path / "scheme.json")
        cfg = SchemeConfig(backend="libsecp256k1", hash_name="sha256")
        cfg.log.level = "DEBUG"
        cfg.save(path)

        loaded = SchemeConfig.load(path)
        assert loaded == cfg

    def test_from_dict_defaults(self):
        assert SchemeConfig.from_dict({}) == SchemeConfig()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("BLINDSECP256K1_BACKEND", "libsecp256k1")
        monkeypatch.setenv("BLINDSECP256K1_HASH", "sha256")
        cfg = SchemeConfig.from_env()
        assert cfg.backend == "libsecp256k1"
        assert cfg.hash_name == "sha256"

    def test_from_env_keeps_base(self, monkeypatch):
        monkeypatch.delenv("BLINDSECP256K1_BACKEND", raising=False)
        monkeypatch.delenv("BLINDSECP256K1_HASH", raising=False)
        base = SchemeConfig(max_blind_attempts=3)
        assert SchemeConfig.from_env(base).max_blind_attempts == 3

    def test_from_env_leaves_base_untouched(self, monkeypatch):
        monkeypatch.setenv("BLINDSECP256K1_HASH", "sha256")
        base = SchemeConfig()
        cfg = SchemeConfig.from_env(base)
        assert cfg.hash_name == "sha256"
        assert base.hash_name == "keccak256"
        assert cfg is not base
        assert cfg.log is not base.log


class TestGetGroup:
    """Tests for backend lookup."""

    def test_python(self):
        assert get_group("python") is SECP256K1

    def test_libsecp(self):
        assert isinstance(get_group("libsecp256k1"), LibSecp256k1)

    def test_unknown(self):
        with pytest.raises(ConfigError):
            get_group("openssl")


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_attaches_handler(self, tmp_path):
        log_file = tmp_path / "blind.log"
        pkg_logger = logging.getLogger("blindsecp256k1")
        before = list(pkg_logger.handlers)
        try:
            configure_logging(LogConfig(level="debug", file=str(log_file)))
            assert pkg_logger.level == logging.DEBUG
            logging.getLogger("blindsecp256k1.protocol").debug("hello")
            for h in pkg_logger.handlers:
                h.flush()
            assert "hello" in log_file.read_text()
        finally:
            for h in pkg_logger.handlers:
                if h not in before:
                    pkg_logger.removeHandler(h)
                    h.close()
            pkg_logger.setLevel(logging.NOTSET)

    def test_repeated_calls_keep_one_handler(self):
        pkg_logger = logging.getLogger("blindsecp256k1")
        before = list(pkg_logger.handlers)
        try:
            configure_logging(LogConfig(level="INFO"))
            configure_logging(LogConfig(level="DEBUG"))
            added = [h for h in pkg_logger.handlers if h not in before]
            assert len(added) == 1
            assert pkg_logger.level == logging.DEBUG
        finally:
            for h in pkg_logger.handlers:
                if h not in before:
                    pkg_logger.removeHandler(h)
                    h.close()
            pkg_logger.setLevel(logging.NOTSET)
