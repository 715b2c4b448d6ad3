from pathlib import Path
from typing import List, Optional, Sequence, Union


class KeyForgeError(Exception):
    """Base class for every error raised by keyforge."""


class GenerationError(KeyForgeError):
    """Key generation failed. The underlying cause is chained but opaque."""


class StorageError(KeyForgeError, OSError):
    """
    Reading or writing an artifact failed.

    `written` lists artifacts that were already written before the failure;
    they are left in place.
    """

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        written: Sequence[Path] = (),
    ) -> None:
        super().__init__(message)
        self.path = path
        self.written: List[Path] = list(written)


class FormatError(KeyForgeError, ValueError):
    """The data is not a key container of the expected kind."""


class DecodeError(KeyForgeError, ValueError):
    """The container was found but its payload is not a valid key."""


class ConfigError(KeyForgeError, ValueError):
    pass
