"""Zip_Adapter for reading Yomichan dictionary zip files."""

from __future__ import annotations

import asyncio
import zipfile
from collections.abc import Mapping
from pathlib import Path

from .base_adapter import BaseAdapter


class Zip_Adapter(BaseAdapter):
    """Adapter for dictionary archives packed as zip files.

    Args:
        file_path: Path to the zip file
    """

    def __init__(self, file_path: Path | str) -> None:
        """Initialize adapter and read the archive listing.

        Args:
            file_path: Path to the zip file

        Raises:
            FileNotFoundError: zip file does not exist
            ValueError: file is not a valid zip archive
        """
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"Zip file not found: {self.file_path}")

        self.name = str(self.file_path)
        try:
            with zipfile.ZipFile(self.file_path) as zf:
                self._list = {info.filename: info for info in zf.infolist() if not info.is_dir()}
        except zipfile.BadZipFile as e:
            raise ValueError(f"Failed to read zip: {self.file_path}") from e

    @property
    def list(self) -> Mapping[str, object]:
        return self._list

    def _read_text(self, name: str) -> str:
        # 同時読み込みに備えて読み込みごとに開き直す
        try:
            with zipfile.ZipFile(self.file_path) as zf:
                return zf.read(name).decode("utf-8")
        except Exception as e:
            # BadZipFile（CRC 不一致）、zlib.error、UnicodeDecodeError など
            raise ValueError(f"Failed to read {name} from zip: {self.file_path}") from e

    async def file(self, name: str) -> str:
        """Read a member file as UTF-8 text without blocking the event loop.

        Raises:
            KeyError: file is not in the archive
            ValueError: member is corrupt or not valid UTF-8
        """
        if name not in self._list:
            raise KeyError(f"{name} not found in {self.name}")
        return await asyncio.to_thread(self._read_text, name)
