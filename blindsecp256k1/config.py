"""
Scheme configuration.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, replace
from typing import List, Optional

from .curve import SECP256K1, CurveGroup
from .errors import ConfigError
from .field import DEFAULT_SAMPLING_ATTEMPTS
from .hash import DEFAULT_HASH, HASHES

logger = logging.getLogger(__name__)

BACKENDS = ("python", "libsecp256k1")

ENV_BACKEND = "BLINDSECP256K1_BACKEND"
ENV_HASH = "BLINDSECP256K1_HASH"

_HANDLER_MARK = "_blindsecp256k1_handler"


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class SchemeConfig:
    """
    Everything that can be tuned on a :class:`~blindsecp256k1.protocol.
    BlindSecp256k1` instance.  The curve itself is fixed.
    """
    backend: str = "python"
    hash_name: str = DEFAULT_HASH

    # rejection sampling / re-blinding bounds
    max_sampling_attempts: int = DEFAULT_SAMPLING_ATTEMPTS
    max_blind_attempts: int = 8

    log: LogConfig = field(default_factory=LogConfig)

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.backend not in BACKENDS:
            errors.append(f"Unknown backend: {self.backend}")

        if self.hash_name not in HASHES:
            errors.append(f"Unknown hash: {self.hash_name}")

        if self.max_sampling_attempts < 1:
            errors.append("max_sampling_attempts must be at least 1")

        if self.max_blind_attempts < 1:
            errors.append("max_blind_attempts must be at least 1")

        if not isinstance(logging.getLevelName(self.log.level.upper()), int):
            errors.append(f"Invalid log level: {self.log.level}")

        return errors

    def check(self) -> SchemeConfig:
        """Raise ``ConfigError`` listing every problem, else return self."""
        errors = self.validate()
        if errors:
            raise ConfigError("; ".join(errors))
        return self

    def save(self, path: str) -> None:
        """Save configuration to file."""
        with open(path, 'w') as f:
            json.dump(asdict(self), f, indent=2)

        logger.info(f"Configuration saved to {path}")

    @classmethod
    def from_dict(cls, data: dict) -> SchemeConfig:
        config = cls(
            backend=data.get("backend", "python"),
            hash_name=data.get("hash_name", DEFAULT_HASH),
            max_sampling_attempts=data.get(
                "max_sampling_attempts", DEFAULT_SAMPLING_ATTEMPTS,
            ),
            max_blind_attempts=data.get("max_blind_attempts", 8),
        )

        if "log" in data:
            config.log = LogConfig(**data["log"])

        return config

    @classmethod
    def load(cls, path: str) -> SchemeConfig:
        """Load configuration from file."""
        with open(path, 'r') as f:
            data = json.load(f)

        config = cls.from_dict(data)
        logger.info(f"Configuration loaded from {path}")
        return config

    @classmethod
    def from_env(cls, base: Optional[SchemeConfig] = None) -> SchemeConfig:
        """
        Overlay ``BLINDSECP256K1_*`` environment variables on a copy of
        *base*; *base* itself is left untouched.
        """
        if base is None:
            config = cls()
        else:
            config = replace(base, log=replace(base.log))
        if ENV_BACKEND in os.environ:
            config.backend = os.environ[ENV_BACKEND]
        if ENV_HASH in os.environ:
            config.hash_name = os.environ[ENV_HASH]
        return config


def get_group(name: str = "python") -> CurveGroup:
    """Resolve a backend name to a :class:`CurveGroup`."""
    if name == "python":
        return SECP256K1
    if name == "libsecp256k1":
        from .libsecp import LibSecp256k1
        return LibSecp256k1()
    raise ConfigError(f"unknown backend {name!r}; choose from {BACKENDS}")


def configure_logging(config: LogConfig) -> None:
    """
    Attach a handler to the package logger.  Library code never calls
    this; applications may.  Calling it again replaces the handler it
    installed before.
    """
    pkg_logger = logging.getLogger("blindsecp256k1")
    for old in list(pkg_logger.handlers):
        if getattr(old, _HANDLER_MARK, False):
            pkg_logger.removeHandler(old)
            old.close()
    pkg_logger.setLevel(config.level.upper())
    if config.file:
        handler: logging.Handler = logging.FileHandler(config.file)
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(config.format))
    setattr(handler, _HANDLER_MARK, True)
    pkg_logger.addHandler(handler)
