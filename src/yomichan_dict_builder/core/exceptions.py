"""Dictionary importer exceptions.

辞書アーカイブ取り込み時のカスタム例外クラスを定義します。
いずれも「どのアーカイブの何が期待と違ったか」をメッセージに含めます。
"""

from __future__ import annotations


class DictionaryImportError(Exception):
    """アーカイブ取り込み失敗の基底例外.

    Attributes:
        source_name: 取り込み対象のアーカイブ名（不明な場合は None）
        detail: 失敗内容
    """

    def __init__(self, detail: str, source_name: str | None = None) -> None:
        self.source_name = source_name
        self.detail = detail
        if source_name:
            message = f"importing {source_name}: {detail}"
        else:
            message = detail
        super().__init__(message)


class MissingIndexError(DictionaryImportError):
    """ファイル一覧に index.json が無い."""

    def __init__(self, source_name: str | None = None) -> None:
        super().__init__("invalid file (missing index.json)", source_name)


class UnsupportedFormatError(DictionaryImportError):
    """index.json の format がサポート対象と一致しない.

    Attributes:
        expected: サポートしている format 番号
        actual: index.json に書かれていた値
    """

    def __init__(self, expected: int, actual: object, source_name: str | None = None) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"invalid format number (expected {expected}, got {actual})", source_name)


class ArchiveReadError(DictionaryImportError):
    """アーカイブ内のファイルを読み込めない（壊れた zip、UTF-8 でないテキストなど）.

    Attributes:
        file: 読み込めなかったファイル名
    """

    def __init__(self, file: str, reason: str, source_name: str | None = None) -> None:
        self.file = file
        super().__init__(f"{file}: failed to read ({reason})", source_name)


class MalformedRecordError(DictionaryImportError):
    """バンクファイルの行が列レイアウトに合わない、または JSON として読めない.

    Attributes:
        file: 問題のあったファイル名（分かる場合）
        row_index: 問題のあった行番号（0始まり、分かる場合）
    """

    def __init__(
        self,
        detail: str,
        source_name: str | None = None,
        file: str | None = None,
        row_index: int | None = None,
    ) -> None:
        self.file = file
        self.row_index = row_index
        location = ""
        if file is not None:
            location = file if row_index is None else f"{file} row {row_index}"
            location = f"{location}: "
        self.reason = detail
        super().__init__(f"{location}{detail}", source_name)

    def with_context(
        self,
        source_name: str,
        file: str | None = None,
        row_index: int | None = None,
    ) -> MalformedRecordError:
        """アーカイブ名・ファイル名・行番号を付与した新しい例外を返す."""
        return MalformedRecordError(
            self.reason,
            source_name=source_name,
            file=file if file is not None else self.file,
            row_index=row_index if row_index is not None else self.row_index,
        )
