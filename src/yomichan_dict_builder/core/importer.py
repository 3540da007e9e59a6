"""辞書アーカイブの取り込み.

index.json の検証 → バンクファイルの分類と整列 → 各行のデコード、の順に処理し、
1アーカイブ分の Dictionary を組み立てます。失敗した場合は例外を送出し、
途中までの Dictionary を返すことはありません。
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable, Sequence
from typing import Any

from loguru import logger

from yomichan_dict_builder.adapters.base_adapter import ArchiveSource

from .banks import BankFile, classify_banks
from .decoder import decode_row
from .exceptions import (
    ArchiveReadError,
    DictionaryImportError,
    MalformedRecordError,
    MissingIndexError,
    UnsupportedFormatError,
)
from .models import INDEX_FILE_NAME, SUPPORTED_FORMAT, Dictionary, Index

JsonParser = Callable[[str], Any]


def _parse(source: ArchiveSource, file: str, text: str, parse_json: JsonParser) -> Any:
    try:
        return parse_json(text)
    except ValueError as e:
        # json.JSONDecodeError は ValueError のサブクラス
        raise MalformedRecordError(f"invalid JSON ({e})", source_name=source.name, file=file) from e


async def _read(source: ArchiveSource, file: str) -> str:
    # アダプタの読み込み失敗（OSError / 壊れた zip・UTF-8 でない内容の ValueError）は
    # このアーカイブだけの失敗として扱う
    try:
        return await source.file(file)
    except (OSError, ValueError) as e:
        raise ArchiveReadError(file, str(e), source.name) from e


async def _read_index(source: ArchiveSource, parse_json: JsonParser) -> Index:
    if INDEX_FILE_NAME not in source.list:
        raise MissingIndexError(source.name)

    data = _parse(source, INDEX_FILE_NAME, await _read(source, INDEX_FILE_NAME), parse_json)
    if not isinstance(data, dict):
        raise MalformedRecordError(
            f"index must be an object, got {type(data).__name__}",
            source_name=source.name,
            file=INDEX_FILE_NAME,
        )

    index = Index.from_json(data)
    if index.format != SUPPORTED_FORMAT:
        raise UnsupportedFormatError(SUPPORTED_FORMAT, index.format, source.name)
    return index


def _apply_bank(
    dictionary: Dictionary,
    source: ArchiveSource,
    bank: BankFile,
    text: str,
    parse_json: JsonParser,
) -> None:
    rows = _parse(source, bank.file, text, parse_json)
    if not isinstance(rows, list):
        raise MalformedRecordError(
            f"bank must be an array of rows, got {type(rows).__name__}",
            source_name=source.name,
            file=bank.file,
        )

    target: list[Any] = {
        "term": dictionary.terms,
        "kanji": dictionary.kanji,
        "tag": dictionary.tags,
        "term_meta": dictionary.terms_meta,
        "kanji_meta": dictionary.kanji_meta,
    }[bank.kind]

    for row_index, row in enumerate(rows):
        try:
            target.append(decode_row(bank.kind, row))
        except MalformedRecordError as e:
            raise e.with_context(source.name, file=bank.file, row_index=row_index) from e

    logger.debug(f"{source.name}: {bank.file} -> {len(rows)} {bank.kind} rows")


async def import_source(
    source: ArchiveSource,
    *,
    parse_json: JsonParser = json.loads,
    prefetch: bool = False,
) -> Dictionary:
    """1アーカイブを取り込み Dictionary を返す.

    バンクファイルは classify_banks() の順（kind → 番号）に処理する。
    prefetch=True の場合は読み込みだけを同時に開始し、デコードは同じ固定順で行う
    （結果は逐次読み込みと同一）。

    Args:
        source: アーカイブソース（name / list / file()）
        parse_json: テキスト → JSON 値 の変換関数
        prefetch: バンクファイルを同時に読み込むか

    Returns:
        取り込み済みの Dictionary（tags は order → name 順）

    Raises:
        MissingIndexError: index.json が無い
        UnsupportedFormatError: format がサポート対象外
        MalformedRecordError: JSON が壊れている、または行の列数・形が不正
        ArchiveReadError: アーカイブ内のファイルを読み込めない
    """
    index = await _read_index(source, parse_json)
    dictionary = Dictionary(index=index, name=source.name)

    banks = classify_banks(source.list.keys())
    logger.debug(f"{source.name}: {len(banks)} bank files ({', '.join(b.file for b in banks)})")

    if prefetch:
        texts = await asyncio.gather(*(_read(source, bank.file) for bank in banks))
        for bank, text in zip(banks, texts, strict=True):
            _apply_bank(dictionary, source, bank, text, parse_json)
    else:
        for bank in banks:
            _apply_bank(dictionary, source, bank, await _read(source, bank.file), parse_json)

    dictionary.tags.sort(key=lambda tag: (tag.order, tag.name))
    return dictionary


async def import_sources(
    sources: Sequence[ArchiveSource],
    *,
    parse_json: JsonParser = json.loads,
    prefetch: bool = False,
) -> tuple[list[Dictionary], list[tuple[str, DictionaryImportError]]]:
    """複数アーカイブを同時に取り込む.

    1つのアーカイブの失敗は他の取り込みを妨げない。成功分は入力順を保つ。

    Returns:
        (取り込めた Dictionary のリスト, (アーカイブ名, 例外) の失敗リスト)
    """
    results = await asyncio.gather(
        *(import_source(source, parse_json=parse_json, prefetch=prefetch) for source in sources),
        return_exceptions=True,
    )

    dictionaries: list[Dictionary] = []
    failures: list[tuple[str, DictionaryImportError]] = []
    for source, result in zip(sources, results, strict=True):
        if isinstance(result, DictionaryImportError):
            logger.warning(f"Skipped archive: {result}")
            failures.append((source.name, result))
        elif isinstance(result, BaseException):
            # 読み込み・デコード失敗は DictionaryImportError に変換済み。それ以外はバグとして伝播させる
            raise result
        else:
            dictionaries.append(result)

    return dictionaries, failures
