"""
Shared fixtures for the keyforge tests.
"""
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from Crypto.PublicKey import RSA

from keyforge.datacls import RSAKeyPair
from keyforge.store import KeyStore
from lib.codec.pem import PemKeyCodec
from lib.storage.base import MemoryStorage


@pytest.fixture(scope="session")
def rsa_key():
    # 1024 bits is the smallest size pycryptodome accepts, keeps the suite fast
    return RSA.generate(1024)


@pytest.fixture
def pair(rsa_key):
    return RSAKeyPair(rsa_key)


@pytest.fixture
def pem_codec():
    return PemKeyCodec()


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def store(tmp_path):
    return KeyStore(directory=tmp_path)


def corrupt_pem(text: str, line: int = 5, column: int = 10) -> str:
    """Swap one base64 character inside the body of an armored block."""
    lines = text.splitlines()
    body = list(lines[line])
    body[column] = "A" if body[column] != "A" else "B"
    lines[line] = "".join(body)
    return "\n".join(lines) + "\n"
