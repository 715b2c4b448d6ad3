import hashlib
from contextlib import contextmanager
from typing import Iterator, Tuple
from Crypto.PublicKey.RSA import RsaKey


def fingerprint(key: RsaKey) -> str:
    # Hash of the public part only, safe to log
    spki = key.publickey().export_key(format="DER")
    return hashlib.sha256(spki).hexdigest()


def crt_values(key: RsaKey) -> Tuple[int, int, int]:
    """Return (dp, dq, qinv) as laid out in PKCS#1."""
    d, p, q = int(key.d), int(key.p), int(key.q)
    return d % (p - 1), d % (q - 1), pow(q, -1, p)


@contextmanager
def scrubbed(buffer: bytearray) -> Iterator[bytearray]:
    """Yield `buffer` and overwrite it with zeros once the block exits."""
    try:
        yield buffer
    finally:
        buffer[:] = bytes(len(buffer))
