"""Destinations for the parts of a workbook package: a directory or a ZIP archive."""

from __future__ import annotations

import os
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Union


class Storage(ABC):
    """Somewhere to write the named parts of a workbook package."""

    @abstractmethod
    def write_blob(self, path: str, blob: bytes) -> None:
        """Write blob as the part at path."""


class DirStorage(Storage):
    """Writes parts as files under a directory, handy for inspecting the XML."""

    def __init__(self, directory: Union[str, os.PathLike]) -> None:
        self.directory = Path(directory)

    def write_blob(self, path: str, blob: bytes) -> None:
        """Write blob to a file under the directory, creating parent directories."""
        target = self.directory / path.lstrip("/")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(blob)


class ZipStorage(Storage):
    """Writes parts into a ZIP archive, producing an .xlsx file."""

    def __init__(self, out: Union[str, os.PathLike, BinaryIO]) -> None:
        self._zip = zipfile.ZipFile(out, "w", compression=zipfile.ZIP_DEFLATED)

    def write_blob(self, path: str, blob: bytes) -> None:
        """Add blob to the archive as an entry named path."""
        self._zip.writestr(path.lstrip("/"), blob)

    def close(self) -> None:
        """Finish the archive; the file is not valid until this is called."""
        self._zip.close()

    def __enter__(self) -> "ZipStorage":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()