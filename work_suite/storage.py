"""
File storage for uploaded items.

Structure:
    {data_path}/files/
    ├── me/
    ├── us/
    ├── we/
    └── there/
        └── {folder}/{timestamp}-{filename}

Items store the path relative to the files root.
"""
from __future__ import annotations

import re
import time
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Optional

import structlog

from .content.enums import SCOPES
from .errors import ValidationFailedError

logger = structlog.get_logger()

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._ -]+")
_STORED_NAME = re.compile(r"^\d+-(.+)$")


def safe_filename(filename: str) -> str:
    """Strip directory parts and unusual characters from an upload name."""
    name = PurePosixPath(filename.replace("\\", "/")).name
    name = _UNSAFE_FILENAME.sub("_", name).strip(" .")
    return name or "upload"


def normalize_folder(folder: Optional[str]) -> str:
    """Validate a user-supplied folder and return it as a relative posix path."""
    if not folder:
        return ""
    path = PurePosixPath(folder.replace("\\", "/"))
    if path.is_absolute() or ".." in path.parts:
        raise ValidationFailedError(
            "Folder must be a relative path without '..'",
            {"field": "folder", "value": folder},
        )
    return str(path).strip("/") if str(path) != "." else ""


class FileStore:
    """Local filesystem store rooted at the files directory."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def ensure_structure(self) -> None:
        """Create the root and one directory per scope."""
        for scope in SCOPES:
            (self.root / scope).mkdir(parents=True, exist_ok=True)

    def resolve(self, relative_path: str) -> Path:
        """Absolute path for a stored relative path, confined to the root."""
        full_path = (self.root / relative_path).resolve()
        root = self.root.resolve()
        if root != full_path and root not in full_path.parents:
            raise ValidationFailedError(
                "Path escapes the files root", {"path": relative_path}
            )
        return full_path

    @staticmethod
    def original_filename(relative_path: str) -> str:
        """The upload's own name, without the timestamp prefix ``save`` adds."""
        name = PurePosixPath(relative_path).name
        match = _STORED_NAME.match(name)
        return match.group(1) if match else name

    def save(
        self,
        scope: str,
        folder: Optional[str],
        filename: str,
        stream: BinaryIO,
        max_bytes: Optional[int] = None,
    ) -> str:
        """Write an upload and return its path relative to the root."""
        if scope not in SCOPES:
            raise ValidationFailedError(
                f"Invalid scope '{scope}'",
                {"field": "scope", "value": scope, "allowed": SCOPES},
            )
        relative_dir = PurePosixPath(scope, normalize_folder(folder))
        stored_name = f"{int(time.time() * 1000)}-{safe_filename(filename)}"
        relative_path = str(relative_dir / stored_name)

        full_path = self.resolve(relative_path)
        full_path.parent.mkdir(parents=True, exist_ok=True)

        written = 0
        with open(full_path, "wb") as f:
            while True:
                chunk = stream.read(1024 * 1024)
                if not chunk:
                    break
                written += len(chunk)
                if max_bytes is not None and written > max_bytes:
                    f.close()
                    full_path.unlink(missing_ok=True)
                    raise ValidationFailedError(
                        "File exceeds the upload limit",
                        {"field": "file", "max_bytes": max_bytes},
                    )
                f.write(chunk)

        logger.info("File stored", path=relative_path, size=written)
        return relative_path

    def remove(self, relative_path: Optional[str]) -> bool:
        """Delete a stored file. A missing file is not an error."""
        if not relative_path:
            return False
        try:
            full_path = self.resolve(relative_path)
        except ValidationFailedError:
            logger.warning("Refusing to delete path outside files root", path=relative_path)
            return False
        if not full_path.is_file():
            return False
        try:
            full_path.unlink()
        except OSError as e:
            logger.warning("Failed to delete stored file", path=relative_path, error=str(e))
            return False
        logger.info("File deleted", path=relative_path)
        return True
