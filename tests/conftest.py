"""
blindsecp256k1 test fixtures
"""

import random
from typing import Callable, Iterator, List

import pytest

from blindsecp256k1 import BlindSecp256k1, SchemeConfig, get_group
from blindsecp256k1.curve import SECP256K1
from blindsecp256k1.libsecp import LibSecp256k1


@pytest.fixture(params=["python", "libsecp256k1"])
def group(request):
    """Each curve engine in turn."""
    return get_group(request.param)


@pytest.fixture
def py_group():
    return SECP256K1


@pytest.fixture
def lib_group():
    return LibSecp256k1()


@pytest.fixture
def scheme() -> BlindSecp256k1:
    return BlindSecp256k1()


@pytest.fixture(params=["keccak256", "sha256"])
def any_scheme(request) -> BlindSecp256k1:
    """Scheme for each backend × hash combination worth covering."""
    return BlindSecp256k1(SchemeConfig(hash_name=request.param))


@pytest.fixture
def key_pair(scheme):
    return scheme.generate_key_pair()


def _scripted_randbytes(chunks: List[bytes]) -> Callable[[int], bytes]:
    """Random source that replays *chunks*, then falls back to a seeded PRNG."""
    it: Iterator[bytes] = iter(chunks)
    rng = random.Random(1234)

    def draw(n: int) -> bytes:
        try:
            chunk = next(it)
        except StopIteration:
            return rng.randbytes(n)
        assert len(chunk) == n
        return chunk

    return draw


@pytest.fixture
def scripted_randbytes():
    """Factory for random sources with a fixed prefix of draws."""
    return _scripted_randbytes
