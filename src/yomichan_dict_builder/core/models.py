"""辞書アーカイブのデータモデル.

Yomichan 形式（format 3）のアーカイブから取り込んだレコードを表す dataclass 群です。
Term/Kanji のタグ参照フィールドは、タグ統合（reconcile_tags）で名前から一意IDへ
その場で書き換えられます。それ以外は構築後に変更しません。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# サポートする index.json の format 番号（これ以外は取り込み不可）
SUPPORTED_FORMAT = 3

INDEX_FILE_NAME = "index.json"


@dataclass(frozen=True)
class Index:
    """index.json の内容."""

    title: str
    format: int
    revision: str = ""
    sequenced: bool = False

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Index:
        """パース済み index.json から生成する（情報フィールドの欠損は既定値で補う）."""
        return cls(
            title=str(data.get("title") or ""),
            format=data.get("format"),  # type: ignore[arg-type]
            revision=str(data.get("revision") or ""),
            sequenced=bool(data.get("sequenced", False)),
        )


@dataclass
class Term:
    """単語エントリ（1エントリ = 1つの語義）.

    rules は活用に関わるタグ（`adj-i`, `v1`, `v5`, `vk`, `vs` など）。
    """

    expression: str
    reading: str
    definition_tags: list[str]
    rules: list[str]
    score: int
    glossary: list[str]
    sequence: int
    term_tags: list[str]


@dataclass
class Kanji:
    """漢字エントリ.

    stats のキーもタグとして扱われ、辞書の tag_bank で説明される。
    """

    character: str
    onyomi: list[str]
    kunyomi: list[str]
    tags: list[str]
    meanings: list[str]
    stats: dict[str, str]


@dataclass
class Tag:
    """タグ定義.

    name は表示名。統合後は一意IDでキー付けされるが、name 自体は書き換えない。
    order は小さいほど先に並ぶ（name より優先）。
    """

    name: str
    category: str = ""
    order: int = 0
    description: str = ""
    score: int = 0

    def is_empty(self) -> bool:
        """名前以外が全て空（参照から自動生成されたプレースホルダ）なら True."""
        return not (self.category or self.description or self.order or self.score)


@dataclass
class Meta:
    """頻度メタデータ（term_meta / kanji_meta）. mode は常に "freq"."""

    expression: str
    mode: str
    data: int | float


@dataclass
class Dictionary:
    """1アーカイブ分の取り込み結果."""

    index: Index
    name: str = ""
    terms: list[Term] = field(default_factory=list)
    kanji: list[Kanji] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)
    terms_meta: list[Meta] = field(default_factory=list)
    kanji_meta: list[Meta] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.index.title
