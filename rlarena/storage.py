"""Local file storage for agent submissions."""

from __future__ import annotations

import os
import shutil
import time
import uuid
from typing import BinaryIO

_ALLOWED_EXTENSIONS = {".py", ".zip"}
_DANGEROUS_SNIPPETS = ("import os", "import sys", "subprocess", "eval(", "exec(")


class StorageError(Exception):
    """A storage operation failed or a file was rejected."""


class Storage:
    """Stores uploaded files under ``base_path``."""

    def __init__(self, base_path: str | os.PathLike) -> None:
        self.base_path = os.fspath(base_path)

    def save_file(self, filename: str, stream: BinaryIO) -> str:
        """Save an upload and return its path relative to the storage root."""
        ext = os.path.splitext(filename)[1]
        if ext not in _ALLOWED_EXTENSIONS:
            raise StorageError("invalid file type: only .py and .zip allowed")

        name = f"{uuid.uuid4()}_{int(time.time())}{ext}"
        relative = os.path.join("submissions", name)
        save_path = os.path.join(self.base_path, relative)

        try:
            os.makedirs(os.path.dirname(save_path), mode=0o755, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"failed to create directory: {exc}") from exc

        try:
            with open(save_path, "wb") as dst:
                shutil.copyfileobj(stream, dst)
        except OSError as exc:
            raise StorageError(f"failed to save file: {exc}") from exc
        return relative

    def validate_python_file(self, file_path: str) -> None:
        """Reject files without definitions or with obviously dangerous code."""
        try:
            with open(self.full_path(file_path), "rb") as fh:
                content = fh.read().decode("utf-8", errors="replace")
        except OSError as exc:
            raise StorageError(f"failed to read file: {exc}") from exc

        if "def" not in content:
            raise StorageError("no function definitions found in Python file")
        for danger in _DANGEROUS_SNIPPETS:
            if danger in content:
                raise StorageError(f"potentially dangerous code detected: {danger}")

    def delete_file(self, file_path: str) -> None:
        try:
            os.remove(self.full_path(file_path))
        except OSError as exc:
            raise StorageError(f"failed to delete file: {exc}") from exc

    def file_url(self, file_path: str) -> str:
        return f"/storage/{file_path}"

    def file_exists(self, file_path: str) -> bool:
        return os.path.exists(self.full_path(file_path))

    def full_path(self, file_path: str) -> str:
        return os.path.join(self.base_path, file_path)