import logging
import re
from typing import Tuple, Union
from Crypto.IO import PEM, PKCS8
from Crypto.PublicKey import RSA
from Crypto.PublicKey.RSA import RsaKey
from Crypto.Util.asn1 import DerSequence
from keyforge.crypto import crt_values
from keyforge.errors import DecodeError, FormatError
from .base import BaseKeyCodec


logger = logging.getLogger(__name__)

PRIVATE_MARKER = "PRIVATE KEY"
PUBLIC_MARKER = "PUBLIC KEY"
PRIVATE_MARKERS = (PRIVATE_MARKER, "RSA PRIVATE KEY")
PUBLIC_MARKERS = (PUBLIC_MARKER, "RSA PUBLIC KEY")

RSA_OID = "1.2.840.113549.1.1.1"
PRIVATE_FORMATS = ("pkcs1", "pkcs8")

_ARMOR = re.compile(
    r"-----BEGIN (?P<marker>[A-Z0-9 ]+)-----\r?\n"
    r"(?P<body>.*?)"
    r"-----END (?P=marker)-----",
    re.DOTALL,
)


def _unarmor(text: Union[str, bytes], markers: Tuple[str, ...]) -> Tuple[bytes, str]:
    """
    Locate the first armored block and return its DER payload and marker.

    Anything wrong with the armor itself is a FormatError; a block whose
    base64 body cannot be decoded is a DecodeError.
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("ascii")
        except UnicodeDecodeError as exc:
            raise FormatError("Key data is not ASCII text") from exc

    match = _ARMOR.search(text)
    if match is None:
        raise FormatError("No PEM armor found")
    marker = match.group("marker")
    if marker not in markers:
        raise FormatError(f"Expected a {' or '.join(markers)} block, found {marker}")
    if "Proc-Type:" in match.group("body"):
        raise FormatError("Encrypted PEM blocks are not supported")

    try:
        der, _, _ = PEM.decode(match.group(0))
    except (ValueError, IndexError, TypeError) as exc:
        raise DecodeError(f"Corrupted {marker} payload: {exc}") from exc
    return der, marker


def _parse_pkcs1_private(der: bytes) -> RsaKey:
    try:
        seq = DerSequence().decode(der, nr_elements=9, only_ints_expected=True)
    except (ValueError, IndexError, TypeError) as exc:
        raise DecodeError(f"Invalid RSAPrivateKey structure: {exc}") from exc
    version, n, e, d, p, q, dp, dq, qinv = list(seq)
    if version != 0:
        raise DecodeError(f"Unsupported RSAPrivateKey version {version}")
    try:
        key = RSA.construct((n, e, d, p, q))
    except (ValueError, TypeError) as exc:
        raise DecodeError(f"Inconsistent RSA key components: {exc}") from exc
    # pycryptodome recomputes the CRT values, so check the stored ones
    if crt_values(key) != (dp, dq, qinv):
        raise DecodeError("Stored CRT values do not match the private key")
    return key


class PemKeyCodec(BaseKeyCodec):
    """
    Text-armored keys.

    Private keys are written as PKCS#1 RSAPrivateKey (or PKCS#8 when asked)
    under a PRIVATE KEY label, public keys as SubjectPublicKeyInfo under
    PUBLIC KEY.
    """

    suffix = ".pem"

    def __init__(self, private_format: str = "pkcs1") -> None:
        if private_format not in PRIVATE_FORMATS:
            raise ValueError(f"Unknown private key format {private_format!r}")
        self.private_format = private_format

    def encode_private(self, key: RsaKey) -> str:
        if not key.has_private():
            raise ValueError("Provided key is not a private RSA key")
        pkcs = 8 if self.private_format == "pkcs8" else 1
        der = key.export_key(format="DER", pkcs=pkcs)
        return PEM.encode(der, PRIVATE_MARKER) + "\n"

    def encode_public(self, key: RsaKey) -> str:
        der = key.publickey().export_key(format="DER")
        return PEM.encode(der, PUBLIC_MARKER) + "\n"

    def decode_private(self, text: Union[str, bytes]) -> RsaKey:
        der, _ = _unarmor(text, PRIVATE_MARKERS)
        try:
            seq = DerSequence().decode(der)
        except (ValueError, IndexError, TypeError) as exc:
            raise DecodeError(f"Malformed private key payload: {exc}") from exc

        if len(seq) in (3, 4) and not isinstance(seq[1], int):
            # PKCS#8 PrivateKeyInfo wrapping an RSAPrivateKey
            try:
                oid, der, _ = PKCS8.unwrap(der)
            except (ValueError, IndexError, TypeError) as exc:
                raise DecodeError(f"Malformed PKCS#8 payload: {exc}") from exc
            if oid != RSA_OID:
                raise DecodeError(f"Not an RSA private key (algorithm {oid})")
        return _parse_pkcs1_private(der)

    def decode_public(self, text: Union[str, bytes]) -> RsaKey:
        der, _ = _unarmor(text, PUBLIC_MARKERS)
        try:
            key = RSA.import_key(der)
        except (ValueError, IndexError, TypeError) as exc:
            raise DecodeError(f"Malformed public key payload: {exc}") from exc
        if key.has_private():
            raise DecodeError("Public key block holds private key material")
        return key

    def dump_private(self, key: RsaKey) -> bytes:
        return self.encode_private(key).encode("ascii")

    def dump_public(self, key: RsaKey) -> bytes:
        return self.encode_public(key).encode("ascii")

    def load_private(self, data: bytes) -> RsaKey:
        return self.decode_private(data)

    def load_public(self, data: bytes) -> RsaKey:
        return self.decode_public(data)
