import os
from pathlib import Path
from typing import Union
from .base import BaseStorage


SECRET_MODE = 0o600
PUBLIC_MODE = 0o644


class FileStorage(BaseStorage):
    def read_bytes(self, path: Union[str, Path]) -> bytearray:
        path = Path(path)
        buffer = bytearray(path.stat().st_size)
        with open(path, "rb") as f:
            read = f.readinto(buffer)
        del buffer[read:]
        return buffer

    def write_bytes(self, path: Union[str, Path], data: bytes, secret: bool = False) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        mode = SECRET_MODE if secret else PUBLIC_MODE
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with open(fd, "wb") as f:
            f.write(data)
