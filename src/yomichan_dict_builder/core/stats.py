"""辞書横断の単語統計.

全辞書の Term を1つの DataFrame にまとめ、見出し・読み・語義の重複状況を集計します。
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import polars as pl

from .models import Dictionary

_TERM_SCHEMA = {
    "expression": pl.String,
    "reading": pl.String,
    "glossary": pl.String,
    "definition_tags": pl.String,
}


@dataclass(frozen=True)
class TermStatistics:
    total_entries: int
    unique_entries: int
    unique_terms: int
    unique_readings: int
    unique_glossary: int
    unique_glossary_readings: int
    glossary_max: int
    glossary_max_key: str
    glossary_mean: float
    glossary_std: float

    def as_dict(self) -> dict[str, object]:
        return {
            "total_entries": self.total_entries,
            "unique_entries": self.unique_entries,
            "unique_terms": self.unique_terms,
            "unique_readings": self.unique_readings,
            "unique_glossary": self.unique_glossary,
            "unique_glossary_readings": self.unique_glossary_readings,
            "glossary_max": self.glossary_max,
            "glossary_max_key": self.glossary_max_key,
            "glossary_mean": self.glossary_mean,
            "glossary_std": self.glossary_std,
        }

    def format(self) -> str:
        return "\n".join(
            [
                f"Total entries   : {self.total_entries}",
                f"Unique entries  : {self.unique_entries}",
                f"Unique terms    : {self.unique_terms}",
                f"Unique readings : {self.unique_readings}",
                f"Unique glossary : {self.unique_glossary}",
                f"Unique glossary/readings : {self.unique_glossary_readings}",
                "",
                f"Glossary max : {self.glossary_max} ({self.glossary_max_key})",
                f"Glossary avg : {self.glossary_mean}",
                f"Glossary std : {self.glossary_std}",
            ]
        )


def terms_dataframe(dictionaries: Sequence[Dictionary]) -> pl.DataFrame:
    """全辞書の Term を (expression, reading, glossary, definition_tags) の DataFrame にする.

    glossary は ", " 区切り、definition_tags は ":" 区切りで1列に連結する。
    """
    rows = [
        {
            "expression": term.expression,
            "reading": term.reading,
            "glossary": ", ".join(str(g) for g in term.glossary),
            "definition_tags": ":".join(term.definition_tags),
        }
        for dictionary in dictionaries
        for term in dictionary.terms
    ]
    return pl.DataFrame(rows, schema=_TERM_SCHEMA)


def compute_term_statistics(dictionaries: Sequence[Dictionary]) -> TermStatistics:
    """見出し・読み・語義の重複統計を計算する.

    - unique_readings: (見出し, 読み) の組
    - unique_entries: (見出し, 読み, 語義) の組
    - unique_glossary_readings: (読み, 語義, 定義タグ) の組。max/mean/std はこのキーごとの件数
    """
    df = terms_dataframe(dictionaries).with_columns(
        pl.concat_str([pl.col("expression"), pl.col("reading")], separator=", ").alias("term_reading"),
    )
    df = df.with_columns(
        pl.concat_str([pl.col("term_reading"), pl.col("glossary")], separator=", ").alias("unique_key"),
        pl.concat_str(
            [pl.col("reading"), pl.col("glossary"), pl.col("definition_tags")], separator=", "
        ).alias("glossary_key"),
    )

    if df.is_empty():
        return TermStatistics(0, 0, 0, 0, 0, 0, 0, "", 0.0, 0.0)

    # 最初に出現したキーを優先するため出現順を保つ
    counts = df.group_by("glossary_key", maintain_order=True).agg(pl.len().alias("count"))
    glossary_max = int(counts["count"].max())  # type: ignore[arg-type]
    glossary_max_key = counts.filter(pl.col("count") == glossary_max)["glossary_key"][0]

    return TermStatistics(
        total_entries=len(df),
        unique_entries=df["unique_key"].n_unique(),
        unique_terms=df["expression"].n_unique(),
        unique_readings=df["term_reading"].n_unique(),
        unique_glossary=df["glossary"].n_unique(),
        unique_glossary_readings=len(counts),
        glossary_max=glossary_max,
        glossary_max_key=glossary_max_key,
        glossary_mean=float(counts["count"].mean()),  # type: ignore[arg-type]
        glossary_std=float(counts["count"].std(ddof=0)),  # type: ignore[arg-type]
    )
