"""展開済みアーカイブ（ディレクトリ）用アダプタ.

zip を展開したディレクトリを、そのままアーカイブソースとして扱います。
サブディレクトリは見ません（Yomichan のアーカイブは全ファイルが直下にある）。
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path

from .base_adapter import BaseAdapter


class Directory_Adapter(BaseAdapter):
    """展開済みアーカイブのディレクトリを読むアダプタ.

    Args:
        dir_path: アーカイブを展開したディレクトリのパス
    """

    def __init__(self, dir_path: Path | str) -> None:
        """アダプタ初期化.

        Raises:
            FileNotFoundError: ディレクトリが存在しない場合
        """
        self.dir_path = Path(dir_path)
        if not self.dir_path.is_dir():
            raise FileNotFoundError(f"Directory not found: {self.dir_path}")

        self.name = str(self.dir_path)
        self._list = {p.name: p for p in sorted(self.dir_path.iterdir()) if p.is_file()}

    @property
    def list(self) -> Mapping[str, object]:
        return self._list

    async def file(self, name: str) -> str:
        """ファイルを UTF-8 テキストとして読み込む.

        Raises:
            KeyError: 一覧に存在しないファイル名
            ValueError: UTF-8 として読めない場合
        """
        path = self._list.get(name)
        if path is None:
            raise KeyError(f"{name} not found in {self.name}")
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ValueError(f"Failed to read {name} as UTF-8: {self.dir_path}") from e
