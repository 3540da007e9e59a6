"""Unit tests for bank file classification."""

from yomichan_dict_builder.core.banks import BankFile, classify_banks, split_bank_name


class TestSplitBankName:
    """split_bank_name関数のテスト."""

    def test_all_kinds(self) -> None:
        """全バンク種別を認識すること."""
        assert split_bank_name("term_bank_1.json") == BankFile("term", "term_bank_1.json", 1)
        assert split_bank_name("kanji_bank_2.json") == BankFile("kanji", "kanji_bank_2.json", 2)
        assert split_bank_name("tag_bank_0.json") == BankFile("tag", "tag_bank_0.json", 0)
        assert split_bank_name("term_meta_bank_3.json") == BankFile("term_meta", "term_meta_bank_3.json", 3)
        assert split_bank_name("kanji_meta_bank_10.json") == BankFile(
            "kanji_meta", "kanji_meta_bank_10.json", 10
        )

    def test_non_bank_files_are_ignored(self) -> None:
        """パターンに合わないファイルは None."""
        for name in [
            "index.json",
            "term_bank.json",
            "term_bank_x.json",
            "foo_bank_1.json",
            "term_bank_1.json.bak",
            "dir/term_bank_1.json",
            "term_bank_-1.json",
        ]:
            assert split_bank_name(name) is None, name


class TestClassifyBanks:
    """classify_banks関数のテスト."""

    def test_order_kind_then_index(self) -> None:
        """kind（辞書順）→ 番号（昇順）で並ぶこと."""
        result = classify_banks(["tag_bank_2.json", "tag_bank_1.json", "term_bank_1.json"])

        assert [b.file for b in result] == ["tag_bank_1.json", "tag_bank_2.json", "term_bank_1.json"]

    def test_numeric_not_lexicographic_index(self) -> None:
        """番号は文字列ではなく数値で比較すること."""
        result = classify_banks(["term_bank_10.json", "term_bank_2.json", "term_bank_1.json"])

        assert [b.index for b in result] == [1, 2, 10]

    def test_mixed_archive(self) -> None:
        """index.json などを除外し、全種別を決定的な順に並べること."""
        names = [
            "index.json",
            "term_meta_bank_1.json",
            "kanji_bank_1.json",
            "term_bank_2.json",
            "kanji_meta_bank_1.json",
            "tag_bank_1.json",
            "term_bank_1.json",
            "README.txt",
        ]

        result = classify_banks(names)

        assert [b.file for b in result] == [
            "kanji_bank_1.json",
            "kanji_meta_bank_1.json",
            "tag_bank_1.json",
            "term_bank_1.json",
            "term_bank_2.json",
            "term_meta_bank_1.json",
        ]

    def test_empty(self) -> None:
        assert classify_banks([]) == []
