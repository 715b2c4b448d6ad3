import logging
from dataclasses import dataclass
from typing import Callable, Optional
from Crypto.PublicKey import RSA
from Crypto.PublicKey.RSA import RsaKey
from .crypto import fingerprint
from .errors import GenerationError


logger = logging.getLogger(__name__)

DEFAULT_PUBLIC_EXPONENT = 65537


@dataclass(eq=False, repr=False)
class RSAKeyPair:
    """
    An RSA private key together with its public half.

    The public key is never stored: it is derived from the private key on
    every access, so the two cannot drift apart. The pair cannot be copied
    and `wipe()` (or leaving a `with` block) drops the private key.
    """

    private_key: Optional[RsaKey]

    def __post_init__(self) -> None:
        if self.private_key is None or not self.private_key.has_private():
            raise ValueError("Provided key is not a private RSA key")

    @staticmethod
    def generate(
        bits: int,
        e: int = DEFAULT_PUBLIC_EXPONENT,
        randfunc: Optional[Callable[[int], bytes]] = None,
    ) -> "RSAKeyPair":
        if isinstance(bits, bool) or not isinstance(bits, int):
            raise GenerationError(f"Key size must be an integer, got {bits!r}")
        if bits <= 0:
            raise GenerationError(f"Key size must be positive, got {bits}")
        try:
            key = RSA.generate(bits, randfunc=randfunc, e=e)
        except Exception as exc:
            # Unsupported sizes and entropy failures look the same to callers
            raise GenerationError(f"Could not generate a {bits}-bit RSA key") from exc
        pair = RSAKeyPair(key)
        logger.info("Generated %d-bit RSA key %s", pair.bits, pair.fingerprint())
        return pair

    @property
    def public_key(self) -> RsaKey:
        return self._key().publickey()

    @property
    def bits(self) -> int:
        return self._key().size_in_bits()

    @property
    def wiped(self) -> bool:
        return self.private_key is None

    def fingerprint(self) -> str:
        return fingerprint(self._key())

    def wipe(self) -> None:
        self.private_key = None

    def _key(self) -> RsaKey:
        if self.private_key is None:
            raise ValueError("Key pair has been wiped")
        return self.private_key

    def __enter__(self) -> "RSAKeyPair":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.wipe()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RSAKeyPair):
            return NotImplemented
        if self.wiped or other.wiped:
            return False
        return self.private_key == other.private_key

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.wiped:
            return "RSAKeyPair(<wiped>)"
        return f"RSAKeyPair(bits={self.bits}, fingerprint={self.fingerprint()[:16]})"

    def __copy__(self) -> "RSAKeyPair":
        raise TypeError("RSAKeyPair holds secret material and cannot be copied")

    def __deepcopy__(self, memo: dict) -> "RSAKeyPair":
        raise TypeError("RSAKeyPair holds secret material and cannot be copied")


def public_key_of(pair: RSAKeyPair) -> RsaKey:
    return pair.public_key
