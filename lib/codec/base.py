from abc import ABC, abstractmethod
from enum import Enum
from Crypto.PublicKey.RSA import RsaKey


class KeyShape(Enum):
    PRIVATE = "private"
    PUBLIC = "public"


def shape_of(key: RsaKey) -> KeyShape:
    return KeyShape.PRIVATE if key.has_private() else KeyShape.PUBLIC


class BaseKeyCodec(ABC):
    """Byte-level interface the key store uses to write and read artifacts."""

    suffix: str = ""

    @abstractmethod
    def dump_private(self, key: RsaKey) -> bytes:
        pass

    @abstractmethod
    def dump_public(self, key: RsaKey) -> bytes:
        pass

    @abstractmethod
    def load_private(self, data: bytes) -> RsaKey:
        pass

    @abstractmethod
    def load_public(self, data: bytes) -> RsaKey:
        pass
