from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Set, Union


class BaseStorage(ABC):
    """Byte-stream read/write capability the key store writes artifacts through."""

    @abstractmethod
    def read_bytes(self, path: Union[str, Path]) -> bytearray:
        pass

    @abstractmethod
    def write_bytes(self, path: Union[str, Path], data: bytes, secret: bool = False) -> None:
        pass


class MemoryStorage(BaseStorage):
    """
    Keeps artifacts in a dict. Paths listed in `failing` raise OSError on
    write, which lets callers exercise partial saves.
    """

    def __init__(self) -> None:
        self.files: Dict[Path, bytes] = {}
        self.failing: Set[Path] = set()

    def read_bytes(self, path: Union[str, Path]) -> bytearray:
        try:
            return bytearray(self.files[Path(path)])
        except KeyError:
            raise FileNotFoundError(f"No such artifact: {path}") from None

    def write_bytes(self, path: Union[str, Path], data: bytes, secret: bool = False) -> None:
        if Path(path) in self.failing:
            raise PermissionError(f"Write refused: {path}")
        self.files[Path(path)] = bytes(data)
