"""バンク行（位置指定のJSON配列）→ 型付きレコードへの変換.

列レイアウトは固定:
    - term:  [expression, reading, definition_tags, rules, score, glossary, sequence, term_tags]
    - kanji: [character, onyomi, kunyomi, tags, meanings, stats]
    - tag:   [name, category, order, notes, score]
    - term_meta / kanji_meta: [expression, mode, data]

列数が合わない行、列の型（文字列・整数・配列・オブジェクト）が合わない行は、
切り詰め・補完せずに MalformedRecordError とする。
値の範囲や内容までは検証しない（index.json の format を信頼する）。
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .exceptions import MalformedRecordError
from .models import Kanji, Meta, Tag, Term

TERM_COLUMNS = 8
KANJI_COLUMNS = 6
TAG_COLUMNS = 5
META_COLUMNS = 3


def split_tags(value: str) -> list[str]:
    """空白区切りの文字列をトークンのリストにする（空トークンは捨てる).

    Examples:
        >>> split_tags("  v5 vt  ")
        ['v5', 'vt']
        >>> split_tags("")
        []
    """
    return [x for x in value.split(" ") if x]


def _unpack(row: Any, arity: int, kind: str) -> list[Any]:
    if not isinstance(row, list):
        raise MalformedRecordError(f"{kind} row must be an array, got {type(row).__name__}")
    if len(row) != arity:
        raise MalformedRecordError(f"{kind} row must have {arity} columns, got {len(row)}")
    return row


def _split_column(value: Any, kind: str, column: str) -> list[str]:
    if not isinstance(value, str):
        raise MalformedRecordError(
            f"{kind} column '{column}' must be a space-delimited string, got {type(value).__name__}"
        )
    return split_tags(value)


def _list_column(value: Any, kind: str, column: str) -> list[Any]:
    if not isinstance(value, list):
        raise MalformedRecordError(f"{kind} column '{column}' must be an array, got {type(value).__name__}")
    return value


def _str_column(value: Any, kind: str, column: str) -> str:
    if not isinstance(value, str):
        raise MalformedRecordError(f"{kind} column '{column}' must be a string, got {type(value).__name__}")
    return value


def _int_column(value: Any, kind: str, column: str) -> int:
    # JSON の true/false は bool（int のサブクラス）なので除外する
    if not isinstance(value, int) or isinstance(value, bool):
        raise MalformedRecordError(f"{kind} column '{column}' must be an integer, got {type(value).__name__}")
    return value


def _number_column(value: Any, kind: str, column: str) -> int | float:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise MalformedRecordError(f"{kind} column '{column}' must be a number, got {type(value).__name__}")
    return value


def decode_term(row: Any) -> Term:
    expression, reading, definition_tags, rules, score, glossary, sequence, term_tags = _unpack(
        row, TERM_COLUMNS, "term"
    )
    return Term(
        expression=_str_column(expression, "term", "expression"),
        reading=_str_column(reading, "term", "reading"),
        definition_tags=_split_column(definition_tags, "term", "definition_tags"),
        rules=_split_column(rules, "term", "rules"),
        score=_int_column(score, "term", "score"),
        glossary=_list_column(glossary, "term", "glossary"),
        sequence=_int_column(sequence, "term", "sequence"),
        term_tags=_split_column(term_tags, "term", "term_tags"),
    )


def decode_kanji(row: Any) -> Kanji:
    character, onyomi, kunyomi, tags, meanings, stats = _unpack(row, KANJI_COLUMNS, "kanji")
    if not isinstance(stats, dict):
        raise MalformedRecordError(f"kanji column 'stats' must be an object, got {type(stats).__name__}")
    return Kanji(
        character=_str_column(character, "kanji", "character"),
        onyomi=_split_column(onyomi, "kanji", "onyomi"),
        kunyomi=_split_column(kunyomi, "kanji", "kunyomi"),
        tags=_split_column(tags, "kanji", "tags"),
        meanings=_list_column(meanings, "kanji", "meanings"),
        stats=dict(stats),
    )


def decode_tag(row: Any) -> Tag:
    # 4列目はファイル上 notes だが、モデルでは description
    name, category, order, notes, score = _unpack(row, TAG_COLUMNS, "tag")
    return Tag(
        name=_str_column(name, "tag", "name"),
        category=_str_column(category, "tag", "category"),
        order=_int_column(order, "tag", "order"),
        description=_str_column(notes, "tag", "notes"),
        score=_int_column(score, "tag", "score"),
    )


def decode_meta(row: Any) -> Meta:
    expression, mode, data = _unpack(row, META_COLUMNS, "meta")
    return Meta(
        expression=_str_column(expression, "meta", "expression"),
        mode=_str_column(mode, "meta", "mode"),
        data=_number_column(data, "meta", "data"),
    )


DECODERS: dict[str, Callable[[Any], Term | Kanji | Tag | Meta]] = {
    "term": decode_term,
    "kanji": decode_kanji,
    "tag": decode_tag,
    "term_meta": decode_meta,
    "kanji_meta": decode_meta,
}


def decode_row(kind: str, row: Any) -> Term | Kanji | Tag | Meta:
    """バンク種別に応じて1行をデコードする.

    Raises:
        ValueError: 未知のバンク種別
        MalformedRecordError: 列数・列の形が不正
    """
    try:
        decoder = DECODERS[kind]
    except KeyError:
        raise ValueError(f"Unknown bank kind: {kind}") from None
    return decoder(row)
