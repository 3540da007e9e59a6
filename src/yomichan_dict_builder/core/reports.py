"""統合タグのレポート出力.

タグ統合結果（名前空間全体と、名前衝突で別IDになったタグ）をCSVとして出力します。
"""

from __future__ import annotations

from pathlib import Path

import polars as pl

from .tags import TagNamespace

_TAG_SCHEMA = {
    "id": pl.String,
    "name": pl.String,
    "category": pl.String,
    "order": pl.Int64,
    "description": pl.String,
    "score": pl.Int64,
    "usage": pl.Int64,
}


def tags_dataframe(namespace: TagNamespace) -> pl.DataFrame:
    """名前空間を1タグ1行の DataFrame にする（IDでソート）."""
    rows = [
        {
            "id": tag_id,
            "name": tag.name,
            "category": tag.category,
            "order": tag.order,
            "description": tag.description,
            "score": tag.score,
            "usage": namespace.usage(tag_id),
        }
        for tag_id, tag in namespace.items()
    ]
    return pl.DataFrame(rows, schema=_TAG_SCHEMA).sort("id")


def export_tag_reports(
    namespace: TagNamespace,
    output_dir: Path | str,
) -> dict[str, Path | None]:
    """タグレポートをCSVファイルとして出力する.

    Args:
        namespace: reconcile_tags() の戻り値
        output_dir: 出力ディレクトリ（無ければ作成する）

    Returns:
        出力したCSVのパス（衝突が無ければ "collisions" は None）
        - "tags": tags.csv
        - "collisions": tag_collisions.csv
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    df = tags_dataframe(namespace)

    tags_path = output_dir / "tags.csv"
    df.write_csv(tags_path)

    result_paths: dict[str, Path | None] = {"tags": tags_path}

    # ID と表示名が異なる = 名前衝突で別IDを割り当てたタグ
    collisions = df.filter(pl.col("id") != pl.col("name"))
    collisions_path = output_dir / "tag_collisions.csv"
    if len(collisions) > 0:
        collisions.write_csv(collisions_path)
        result_paths["collisions"] = collisions_path
    else:
        result_paths["collisions"] = None

    return result_paths
