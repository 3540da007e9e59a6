"""辞書取り込みのコア処理群.

- デコード（バンク行 → Term/Kanji/Tag/Meta）
- 取り込み（index.json 検証、バンクの分類と整列）
- タグ統合（複数辞書 → 共有タグ名前空間、衝突解決）
"""

from .banks import BankFile, classify_banks
from .exceptions import (
    DictionaryImportError,
    MalformedRecordError,
    MissingIndexError,
    UnsupportedFormatError,
)
from .importer import import_source, import_sources
from .models import Dictionary, Index, Kanji, Meta, Tag, Term
from .tags import TagNamespace, reconcile_tags

__all__ = [
    "BankFile",
    "classify_banks",
    "DictionaryImportError",
    "MalformedRecordError",
    "MissingIndexError",
    "UnsupportedFormatError",
    "import_source",
    "import_sources",
    "Dictionary",
    "Index",
    "Kanji",
    "Meta",
    "Tag",
    "Term",
    "TagNamespace",
    "reconcile_tags",
]
