import logging
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional, Union
from Crypto.PublicKey.RSA import RsaKey
from lib.codec.base import BaseKeyCodec, KeyShape
from lib.codec.binary import BinaryKeyCodec
from lib.codec.pem import PemKeyCodec
from lib.storage.base import BaseStorage
from lib.storage.file import FileStorage
from .config import KeyStoreConfig
from .crypto import scrubbed
from .datacls import DEFAULT_PUBLIC_EXPONENT, RSAKeyPair
from .errors import StorageError
from .naming import ArtifactForm, KeyKind, NamingScheme


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class KeyStore:
    """
    Generates, saves and loads RSA key pairs.

    The private key is the only source of truth: loading never trusts a
    public key artifact, the public key is always re-derived.
    """

    def __init__(
        self,
        directory: Optional[PathLike] = None,
        naming: NamingScheme = NamingScheme.SEPARATE_SUFFIXED,
        storage: Optional[BaseStorage] = None,
        pem_codec: Optional[PemKeyCodec] = None,
        binary_codec: Optional[BinaryKeyCodec] = None,
        default_bits: int = 2048,
        public_exponent: int = DEFAULT_PUBLIC_EXPONENT,
    ) -> None:
        self.directory = Path(directory) if directory is not None else None
        self.naming = naming
        self.storage = storage or FileStorage()
        self.pem_codec = pem_codec or PemKeyCodec()
        self.binary_codec = binary_codec or BinaryKeyCodec()
        self.default_bits = default_bits
        self.public_exponent = public_exponent

    @staticmethod
    def from_config(config: KeyStoreConfig, storage: Optional[BaseStorage] = None) -> "KeyStore":
        return KeyStore(
            directory=config.key_dir,
            naming=config.naming_scheme,
            storage=storage,
            pem_codec=PemKeyCodec(config.private_format),
            default_bits=config.default_bits,
            public_exponent=config.public_exponent,
        )

    def generate(self, bits: Optional[int] = None) -> RSAKeyPair:
        return RSAKeyPair.generate(self.default_bits if bits is None else bits, e=self.public_exponent)

    def save(self, pair: RSAKeyPair, name: PathLike) -> List[Path]:
        """
        Write every artifact the naming scheme defines for `name`.

        Artifacts are written one by one. On failure a StorageError is raised
        with `written` listing what is already on disk; nothing is rolled back.
        """
        if pair.wiped:
            raise ValueError("Cannot save a wiped key pair")
        written: List[Path] = []
        for artifact in self.naming.artifacts(name):
            path = self.__resolve(artifact.path)
            codec = self.__codec(artifact.form)
            secret = artifact.kind is KeyKind.PRIVATE
            if secret:
                data = codec.dump_private(pair.private_key)
            else:
                data = codec.dump_public(pair.public_key)
            try:
                self.__write(path, data, secret)
            except StorageError as exc:
                if written:
                    logger.warning(
                        "Partial save of %s: %d artifact(s) left in place", name, len(written)
                    )
                exc.written = list(written)
                raise
            written.append(path)
        return written

    def save_minimal(self, pair: RSAKeyPair, path: PathLike) -> Path:
        if pair.wiped:
            raise ValueError("Cannot save a wiped key pair")
        # The public key is re-derivable, the private PEM is all we need
        path = self.__resolve(Path(path))
        self.__write(path, self.pem_codec.dump_private(pair.private_key), secret=True)
        return path

    def load(self, private_path: PathLike, public_path: Optional[PathLike] = None) -> RSAKeyPair:
        """
        Load a pair from its private PEM.

        `public_path` is accepted for symmetry with `save` but is never read:
        the public key is derived from the private key.
        """
        if public_path is not None:
            logger.debug("Ignoring public key path %s, deriving from private key", public_path)
        key = self.__read_key(self.__resolve(Path(private_path)), self.pem_codec.load_private)
        return RSAKeyPair(key)

    def load_simple(self, name: PathLike) -> RSAKeyPair:
        return self.load(self.naming.private_text_path(name))

    def load_public(self, path: PathLike) -> RsaKey:
        return self.__read_key(self.__resolve(Path(path)), self.pem_codec.load_public)

    def load_binary(self, path: PathLike, shape: KeyShape) -> RsaKey:
        loader = partial(self.binary_codec.decode, shape=shape)
        return self.__read_key(self.__resolve(Path(path)), loader)

    def __resolve(self, path: Path) -> Path:
        if self.directory is None or path.is_absolute():
            return path
        return self.directory / path

    def __codec(self, form: ArtifactForm) -> BaseKeyCodec:
        return self.binary_codec if form is ArtifactForm.BINARY else self.pem_codec

    def __write(self, path: Path, data: bytes, secret: bool) -> None:
        try:
            self.storage.write_bytes(path, data, secret=secret)
        except OSError as exc:
            raise StorageError(f"Failed to write {path}: {exc}", path=path) from exc
        logger.info("Wrote %s", path)

    def __read_key(self, path: Path, loader: Callable[[bytes], RsaKey]) -> RsaKey:
        try:
            buffer = self.storage.read_bytes(path)
        except OSError as exc:
            raise StorageError(f"Failed to read {path}: {exc}", path=path) from exc
        logger.debug("Read %s", path)
        with scrubbed(buffer):
            return loader(bytes(buffer))
