"""バンクファイルの分類と処理順の決定.

アーカイブ内のファイル名を `<kind>_bank_<N>.json` 形式で分類し、
kind（辞書順）→ N（数値昇順）で並べます。後続のバンクが前のバンクを拡張する
ことがあるため、処理順は実行ごとに再現可能でなければなりません。

認識するアーカイブの構成:
    - 頻度データ（例: innocent_corpus.zip）: term_meta_bank, kanji_meta_bank
    - 単語辞書（例: jmdict_english.zip）: term_bank, tag_bank
    - 漢字辞書（例: kanjidic_english.zip）: kanji_bank, tag_bank
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

BANK_KINDS = ("term", "kanji", "tag", "term_meta", "kanji_meta")

_BANK_NAME = re.compile(r"^(term|kanji|tag|term_meta|kanji_meta)_bank_(\d+)\.json$")


@dataclass(frozen=True)
class BankFile:
    kind: str
    file: str
    index: int


def split_bank_name(name: str) -> BankFile | None:
    """ファイル名をバンク種別と番号に分解する.

    Examples:
        >>> split_bank_name("term_bank_12.json")
        BankFile(kind='term', file='term_bank_12.json', index=12)
        >>> split_bank_name("index.json") is None
        True
    """
    m = _BANK_NAME.match(name)
    if not m:
        return None
    return BankFile(kind=m.group(1), file=name, index=int(m.group(2)))


def classify_banks(names: Iterable[str]) -> list[BankFile]:
    """バンクファイルだけを抽出し、(kind, index) 順に並べる.

    パターンに合わないファイルは無視する（エラーにしない）。
    """
    banks = [bank for bank in (split_bank_name(name) for name in names) if bank is not None]
    return sorted(banks, key=lambda b: (b.kind, b.index))
