import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union
from lib.codec.pem import PRIVATE_FORMATS
from .errors import ConfigError
from .naming import NamingScheme


logger = logging.getLogger(__name__)


@dataclass
class KeyStoreConfig:
    key_dir: Optional[str] = None
    naming: str = NamingScheme.SEPARATE_SUFFIXED.value
    default_bits: int = 2048
    public_exponent: int = 65537
    private_format: str = "pkcs1"

    def __post_init__(self) -> None:
        try:
            NamingScheme(self.naming)
        except ValueError:
            raise ConfigError(f"Unknown naming scheme {self.naming!r}") from None
        if self.private_format not in PRIVATE_FORMATS:
            raise ConfigError(f"Unknown private key format {self.private_format!r}")
        for name in ("default_bits", "public_exponent"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

    @property
    def naming_scheme(self) -> NamingScheme:
        return NamingScheme(self.naming)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "KeyStoreConfig":
        known = {f.name for f in fields(KeyStoreConfig)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        config = asdict(KeyStoreConfig())
        config.update(data)
        return KeyStoreConfig(**config)

    @staticmethod
    def from_file(path: Union[str, Path]) -> "KeyStoreConfig":
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Failed to load config from {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config in {path} must be a JSON object")
        logger.debug("Loaded key store config from %s", path)
        return KeyStoreConfig.from_dict(data)
