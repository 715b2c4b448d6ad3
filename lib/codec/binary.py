from typing import Dict, List, Union
from Crypto.PublicKey import RSA
from Crypto.PublicKey.RSA import RsaKey
from Crypto.Util.asn1 import DerOctetString, DerSequence
from keyforge.crypto import crt_values
from keyforge.errors import DecodeError
from .base import BaseKeyCodec, KeyShape, shape_of


TAGS: Dict[KeyShape, bytes] = {
    KeyShape.PRIVATE: b"keyforge-rsa-private-v1",
    KeyShape.PUBLIC: b"keyforge-rsa-public-v1",
}

# n, e, d, p, q, dp, dq, qinv
PRIVATE_FIELD_COUNT = 8
PUBLIC_FIELD_COUNT = 2


class BinaryKeyCodec(BaseKeyCodec):
    """
    Native binary form for same-system reloads.

    A DER SEQUENCE whose first element is an OCTET STRING naming the shape,
    followed by the key's integers exactly as they are held in memory.
    """

    suffix = ".key"

    def encode(self, key: RsaKey) -> bytes:
        shape = shape_of(key)
        if shape is KeyShape.PRIVATE:
            fields = [int(key.n), int(key.e), int(key.d), int(key.p), int(key.q), *crt_values(key)]
        else:
            fields = [int(key.n), int(key.e)]
        return DerSequence([DerOctetString(TAGS[shape]), *fields]).encode()

    def decode(self, data: Union[bytes, bytearray], shape: KeyShape) -> RsaKey:
        try:
            seq = DerSequence().decode(bytes(data))
        except (ValueError, IndexError, TypeError) as exc:
            raise DecodeError(f"Malformed binary key container: {exc}") from exc

        if len(seq) == 0 or isinstance(seq[0], int):
            raise DecodeError("Binary key container has no shape tag")
        try:
            tag = DerOctetString().decode(seq[0]).payload
        except (ValueError, IndexError, TypeError) as exc:
            raise DecodeError(f"Malformed shape tag: {exc}") from exc
        if tag != TAGS[shape]:
            raise DecodeError(f"Expected a {shape.value} key container, found tag {tag!r}")

        fields: List = list(seq[1:])
        expected = PRIVATE_FIELD_COUNT if shape is KeyShape.PRIVATE else PUBLIC_FIELD_COUNT
        if len(fields) != expected:
            raise DecodeError(f"Expected {expected} key fields, found {len(fields)}")
        if not all(isinstance(f, int) for f in fields):
            raise DecodeError("Key fields must all be integers")

        try:
            key = RSA.construct(tuple(fields[:5] if shape is KeyShape.PRIVATE else fields))
        except (ValueError, TypeError) as exc:
            raise DecodeError(f"Inconsistent RSA key components: {exc}") from exc
        if shape is KeyShape.PRIVATE and crt_values(key) != tuple(fields[5:]):
            raise DecodeError("Stored CRT values do not match the private key")
        return key

    def dump_private(self, key: RsaKey) -> bytes:
        if not key.has_private():
            raise ValueError("Provided key is not a private RSA key")
        return self.encode(key)

    def dump_public(self, key: RsaKey) -> bytes:
        return self.encode(key.publickey())

    def load_private(self, data: bytes) -> RsaKey:
        return self.decode(data, KeyShape.PRIVATE)

    def load_public(self, data: bytes) -> RsaKey:
        return self.decode(data, KeyShape.PUBLIC)
