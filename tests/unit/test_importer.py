"""Unit tests for dictionary import."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping

import pytest

from yomichan_dict_builder.adapters.base_adapter import BaseAdapter
from yomichan_dict_builder.core.exceptions import (
    ArchiveReadError,
    DictionaryImportError,
    MalformedRecordError,
    MissingIndexError,
    UnsupportedFormatError,
)
from yomichan_dict_builder.core.importer import import_source, import_sources
from yomichan_dict_builder.core.models import Index, Tag

INDEX = {"title": "Test Dict", "format": 3, "revision": "test.1", "sequenced": True}


class _MemorySource(BaseAdapter):
    """テスト用のメモリ上アーカイブ（読み込んだファイル名を記録する）."""

    def __init__(self, name: str, files: dict[str, object]) -> None:
        self.name = name
        self._files = {k: v if isinstance(v, str) else json.dumps(v) for k, v in files.items()}
        self.reads: list[str] = []

    @property
    def list(self) -> Mapping[str, object]:
        return self._files

    async def file(self, name: str) -> str:
        self.reads.append(name)
        await asyncio.sleep(0)
        return self._files[name]


def _import(source: _MemorySource, **kwargs):
    return asyncio.run(import_source(source, **kwargs))


class TestImportSource:
    """import_source関数のテスト."""

    def test_minimal_archive(self) -> None:
        source = _MemorySource(
            "minimal.zip",
            {
                "index.json": {"format": 3},
                "term_bank_1.json": [["食べる", "たべる", "", "v1", 0, ["to eat"], 1, "v1"]],
                "tag_bank_1.json": [["v1", "verb", 1, "Ichidan verb", 0]],
            },
        )

        dictionary = _import(source)

        assert dictionary.name == "minimal.zip"
        assert dictionary.index.format == 3
        assert len(dictionary.terms) == 1
        assert dictionary.terms[0].rules == ["v1"]
        assert dictionary.tags == [Tag(name="v1", category="verb", order=1, description="Ichidan verb", score=0)]

    def test_index_fields(self) -> None:
        dictionary = _import(_MemorySource("a", {"index.json": INDEX}))

        assert dictionary.index == Index(title="Test Dict", format=3, revision="test.1", sequenced=True)
        assert dictionary.terms == []
        assert dictionary.tags == []

    def test_missing_index(self) -> None:
        source = _MemorySource("broken.zip", {"term_bank_1.json": []})

        with pytest.raises(MissingIndexError, match="importing broken.zip: .*missing index.json"):
            _import(source)

    def test_unsupported_format(self) -> None:
        """format 2 は取り込まないこと（バンクも読まない）."""
        source = _MemorySource(
            "old.zip",
            {"index.json": {"format": 2}, "term_bank_1.json": [["a", "a", "", "", 0, [], 1, ""]]},
        )

        with pytest.raises(UnsupportedFormatError, match=r"expected 3, got 2") as excinfo:
            _import(source)

        assert excinfo.value.expected == 3
        assert excinfo.value.actual == 2
        assert excinfo.value.source_name == "old.zip"
        assert source.reads == ["index.json"]

    def test_malformed_row_reports_location(self) -> None:
        source = _MemorySource(
            "bad.zip",
            {
                "index.json": INDEX,
                "term_bank_1.json": [
                    ["a", "a", "", "", 0, [], 1, ""],
                    ["b", "b", "", "", 0, [], 2],
                ],
            },
        )

        with pytest.raises(MalformedRecordError) as excinfo:
            _import(source)

        error = excinfo.value
        assert error.source_name == "bad.zip"
        assert error.file == "term_bank_1.json"
        assert error.row_index == 1
        assert "importing bad.zip: term_bank_1.json row 1:" in str(error)
        assert isinstance(error, DictionaryImportError)

    def test_wrong_scalar_type_reports_location(self) -> None:
        """order が文字列のタグ行は、整列前に MalformedRecordError になること."""
        source = _MemorySource(
            "bad.zip",
            {"index.json": INDEX, "tag_bank_1.json": [["a", "x", 1, "", 0], ["b", "x", "2", "", 0]]},
        )

        with pytest.raises(MalformedRecordError, match="tag_bank_1.json row 1: tag column 'order'") as excinfo:
            _import(source)

        assert excinfo.value.source_name == "bad.zip"

    def test_unreadable_file(self) -> None:
        class _Unreadable(_MemorySource):
            async def file(self, name: str) -> str:
                if name == "tag_bank_1.json":
                    raise ValueError("invalid utf-8")
                return await super().file(name)

        source = _Unreadable("bad.zip", {"index.json": INDEX, "tag_bank_1.json": []})

        with pytest.raises(ArchiveReadError, match="importing bad.zip: tag_bank_1.json: failed to read"):
            _import(source)

    def test_invalid_json(self) -> None:
        source = _MemorySource("bad.zip", {"index.json": INDEX, "tag_bank_1.json": "[[not json"})

        with pytest.raises(MalformedRecordError, match="tag_bank_1.json: invalid JSON"):
            _import(source)

    def test_bank_must_be_array(self) -> None:
        source = _MemorySource("bad.zip", {"index.json": INDEX, "tag_bank_1.json": {"v1": "verb"}})

        with pytest.raises(MalformedRecordError, match="bank must be an array of rows"):
            _import(source)

    def test_index_must_be_object(self) -> None:
        with pytest.raises(MalformedRecordError, match="index must be an object"):
            _import(_MemorySource("bad.zip", {"index.json": [3]}))

    def test_bank_order_and_meta_lists(self) -> None:
        """バンクは kind → 番号順に読み、meta は terms_meta / kanji_meta に振り分けること."""
        source = _MemorySource(
            "mixed.zip",
            {
                "index.json": INDEX,
                "term_bank_2.json": [["b", "b", "", "", 0, [], 2, ""]],
                "term_bank_1.json": [["a", "a", "", "", 0, [], 1, ""]],
                "term_meta_bank_1.json": [["a", "freq", 10]],
                "kanji_meta_bank_1.json": [["食", "freq", 328]],
                "kanji_bank_1.json": [["食", "ショク", "た.べる", "", ["eat"], {}]],
                "styles.css": "body {}",
            },
        )

        dictionary = _import(source)

        assert source.reads == [
            "index.json",
            "kanji_bank_1.json",
            "kanji_meta_bank_1.json",
            "term_bank_1.json",
            "term_bank_2.json",
            "term_meta_bank_1.json",
        ]
        assert [t.expression for t in dictionary.terms] == ["a", "b"]
        assert [m.data for m in dictionary.terms_meta] == [10]
        assert [m.data for m in dictionary.kanji_meta] == [328]
        assert dictionary.kanji[0].kunyomi == ["た.べる"]

    def test_tags_sorted_by_order_then_name(self) -> None:
        source = _MemorySource(
            "tags.zip",
            {
                "index.json": INDEX,
                "tag_bank_1.json": [
                    ["vt", "", 0, "transitive", 0],
                    ["n", "partOfSpeech", -3, "noun", 0],
                    ["adj-i", "", 0, "adjective", 0],
                ],
                "tag_bank_2.json": [["P", "popular", -10, "popular term", 10]],
            },
        )

        dictionary = _import(source)

        assert [t.name for t in dictionary.tags] == ["P", "n", "adj-i", "vt"]

    def test_prefetch_gives_same_result(self) -> None:
        files = {
            "index.json": INDEX,
            "term_bank_1.json": [["a", "a", "", "v5", 0, ["x"], 1, ""]],
            "term_bank_2.json": [["b", "b", "n", "", 0, ["y"], 2, "P"]],
            "tag_bank_1.json": [["v5", "verb", 0, "Godan verb", 0]],
        }

        sequential = _import(_MemorySource("a", files))
        prefetched = _import(_MemorySource("a", files), prefetch=True)

        assert prefetched == sequential

    def test_custom_json_parser(self) -> None:
        """JSON 変換関数を差し替えられること."""
        parsed: list[str] = []

        def parse(text: str):
            parsed.append(text)
            return json.loads(text)

        _import(_MemorySource("a", {"index.json": INDEX}), parse_json=parse)

        assert len(parsed) == 1


class TestImportSources:
    """import_sources関数のテスト."""

    def test_failure_does_not_block_others(self) -> None:
        good1 = _MemorySource("good1.zip", {"index.json": {**INDEX, "title": "One"}})
        bad = _MemorySource("bad.zip", {"index.json": {"format": 2}})
        good2 = _MemorySource("good2.zip", {"index.json": {**INDEX, "title": "Two"}})

        dictionaries, failures = asyncio.run(import_sources([good1, bad, good2]))

        assert [d.title for d in dictionaries] == ["One", "Two"]
        assert len(failures) == 1
        assert failures[0][0] == "bad.zip"
        assert isinstance(failures[0][1], UnsupportedFormatError)

    def test_read_errors_skip_only_that_archive(self) -> None:
        """読み込み失敗（IO エラー・UTF-8 でない内容）はそのアーカイブだけスキップすること."""

        class _Unreadable(_MemorySource):
            async def file(self, name: str) -> str:
                if name == "term_bank_1.json":
                    raise ValueError("invalid utf-8")
                return await super().file(name)

        class _DiskError(_MemorySource):
            async def file(self, name: str) -> str:
                raise OSError("disk error")

        good = _MemorySource("good.zip", {"index.json": {**INDEX, "title": "good"}})
        unreadable = _Unreadable("bad.zip", {"index.json": INDEX, "term_bank_1.json": []})
        disk = _DiskError("disk.zip", {"index.json": INDEX})

        dictionaries, failures = asyncio.run(import_sources([unreadable, good, disk]))

        assert [d.title for d in dictionaries] == ["good"]
        assert [name for name, _ in failures] == ["bad.zip", "disk.zip"]
        assert all(isinstance(error, ArchiveReadError) for _, error in failures)
        assert failures[0][1].file == "term_bank_1.json"
        assert failures[1][1].file == "index.json"

    def test_unexpected_errors_propagate(self) -> None:
        """読み込み・デコード以外の想定外の例外はそのまま送出すること."""

        class _Buggy(_MemorySource):
            async def file(self, name: str) -> str:
                raise RuntimeError("bug")

        with pytest.raises(RuntimeError, match="bug"):
            asyncio.run(import_sources([_Buggy("buggy.zip", {"index.json": INDEX})]))
