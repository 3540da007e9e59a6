"""アーカイブソース用アダプタ（基底クラス）.

辞書アーカイブ（zip / 展開済みディレクトリなど）を共通インターフェースで扱うための
プロトコルと抽象基底クラスを定義します。取り込み処理（import_source）は
name / list / file() の3つだけに依存し、IO の詳細はアダプタ側に閉じ込めます。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class ArchiveSource(Protocol):
    """取り込み処理が要求するアーカイブの最小インターフェース."""

    # エラーメッセージ・ログ用の名前
    name: str

    @property
    def list(self) -> Mapping[str, object]: ...

    async def file(self, name: str) -> str: ...


class BaseAdapter(ABC):
    """アーカイブアダプタの基底クラス.

    全てのアーカイブアダプタはこのクラスを継承し、
    list / file() を実装します。
    """

    name: str

    @property
    @abstractmethod
    def list(self) -> Mapping[str, object]:
        """アーカイブ内のファイル一覧（ファイル名 → 存在マーカー）.

        取り込み時の検証とバンクファイル列挙にのみ使う。
        """
        ...

    @abstractmethod
    async def file(self, name: str) -> str:
        """ファイルを UTF-8 テキストとして読み込む.

        Raises:
            KeyError: 一覧に存在しないファイル名
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
