"""辞書ビルダー（オーケストレーター）.

ソースディレクトリにある辞書アーカイブ（*.zip と展開済みディレクトリ）を全て取り込み、
タグを1つの名前空間に統合して、単語統計とレポートを出力する。
デコードやタグ統合の中身は core 側に寄せ、ここでは「取り込み順（再現性）」
「失敗したアーカイブのスキップとレポート」「一連の処理の実行」を担う。
"""

from __future__ import annotations

import argparse
import asyncio
import csv
import sys
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from yomichan_dict_builder.adapters import BaseAdapter, Directory_Adapter, Zip_Adapter
from yomichan_dict_builder.core.config import BuilderConfig, load_config
from yomichan_dict_builder.core.importer import import_sources
from yomichan_dict_builder.core.models import INDEX_FILE_NAME, Dictionary
from yomichan_dict_builder.core.reports import export_tag_reports
from yomichan_dict_builder.core.stats import TermStatistics, compute_term_statistics
from yomichan_dict_builder.core.summary import dictionary_info
from yomichan_dict_builder.core.tags import TagNamespace, reconcile_tags


@dataclass
class BuildResult:
    dictionaries: list[Dictionary]
    tags: TagNamespace
    statistics: TermStatistics
    skipped: list[tuple[str, str]] = field(default_factory=list)


def discover_sources(sources_dir: Path) -> tuple[list[BaseAdapter], list[tuple[str, str]]]:
    """ソースディレクトリ直下のアーカイブを名前順に列挙する.

    - `*.zip`（大文字小文字は問わない）は Zip_Adapter
    - index.json を含むサブディレクトリは Directory_Adapter

    Returns:
        (アダプタのリスト, 開けなかったアーカイブの (名前, 理由) リスト)
    """
    sources: list[BaseAdapter] = []
    skipped: list[tuple[str, str]] = []
    for path in sorted(sources_dir.iterdir()):
        try:
            if path.is_file() and path.suffix.lower() == ".zip":
                sources.append(Zip_Adapter(path))
            elif path.is_dir() and (path / INDEX_FILE_NAME).is_file():
                sources.append(Directory_Adapter(path))
        except ValueError as e:
            logger.warning(f"Skipped {path}: {e}")
            skipped.append((str(path), str(e)))
    return sources, skipped


def _write_skipped_tsv(path: Path, skipped: list[tuple[str, str]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, delimiter="\t")
        writer.writerow(["source", "reason"])
        writer.writerows(skipped)


def build_dictionaries(
    sources_dir: Path | str,
    config: BuilderConfig | None = None,
    report_dir: Path | str | None = None,
) -> BuildResult:
    """ソースディレクトリの全アーカイブを取り込み、タグを統合する.

    Args:
        sources_dir: アーカイブを置いたディレクトリ
        config: ビルダー設定（None の場合は既定値）
        report_dir: レポート出力先（None の場合は出力しない）

    Returns:
        取り込んだ辞書・統合タグ・統計・スキップしたアーカイブ

    Raises:
        FileNotFoundError: sources_dir が存在しない場合
    """
    sources_dir = Path(sources_dir)
    if not sources_dir.is_dir():
        raise FileNotFoundError(f"Sources directory not found: {sources_dir}")
    config = config or BuilderConfig()

    # Phase 1: 取り込み
    sources, skipped = discover_sources(sources_dir)
    logger.info(f"[Phase 1] Importing {len(sources)} archives from {sources_dir}")
    dictionaries, failures = asyncio.run(import_sources(sources, prefetch=config.prefetch))
    skipped.extend((name, str(error)) for name, error in failures)

    for dictionary in dictionaries:
        logger.info(f"Imported {dictionary.name}: {dictionary_info(dictionary, short=True)}")
        if config.output_dict_info:
            logger.info("\n" + dictionary_info(dictionary, indent="    "))

    # Phase 2: タグ統合
    logger.info("[Phase 2] Merging tags")
    tags = reconcile_tags(
        dictionaries,
        delete_unused=config.delete_unused,
        delete_empty=config.delete_empty,
    )

    # Phase 3: 統計
    logger.info("[Phase 3] Computing term statistics")
    statistics = compute_term_statistics(dictionaries)
    logger.info("\n" + statistics.format())

    # レポート出力（前回実行分が残ると紛らわしいので、常に上書きする）
    if report_dir is not None:
        report_dir_path = Path(report_dir)
        paths = export_tag_reports(tags, report_dir_path)
        skipped_report = report_dir_path / "skipped_sources.tsv"
        _write_skipped_tsv(skipped_report, skipped)
        logger.info(f"Tag report: {paths['tags']} ({len(tags)} tags)")
        if paths["collisions"] is not None:
            logger.warning(f"Tag collisions report: {paths['collisions']}")
        logger.info(f"Skipped sources report: {skipped_report} ({len(skipped)} sources)")

    logger.info(f"[COMPLETE] Imported {len(dictionaries)} dictionaries, skipped {len(skipped)}")
    return BuildResult(dictionaries=dictionaries, tags=tags, statistics=statistics, skipped=skipped)


def main() -> None:
    """CLI エントリポイント."""
    parser = argparse.ArgumentParser(description="Import Yomichan dictionaries and merge their tags")
    parser.add_argument(
        "--sources",
        type=Path,
        default=Path("./data/source"),
        help="Directory containing dictionary archives (*.zip or unpacked directories)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional JSON config file",
    )
    parser.add_argument(
        "--report-dir",
        type=Path,
        default=None,
        help="Report output directory (tags.csv, tag_collisions.csv, skipped_sources.tsv)",
    )
    parser.add_argument(
        "--delete-unused",
        action="store_true",
        default=None,
        help="Remove tags that are never referenced by any entry",
    )
    parser.add_argument(
        "--delete-empty",
        action="store_true",
        default=None,
        help="Remove tags that were referenced but never defined",
    )
    parser.add_argument(
        "--prefetch",
        action="store_true",
        default=None,
        help="Read all bank files of an archive concurrently",
    )
    parser.add_argument(
        "--dict-info",
        action="store_true",
        default=None,
        help="Log a detailed summary for every imported dictionary",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    if args.verbose:
        logger.remove()
        logger.add(sys.stderr, level="DEBUG")

    config = load_config(args.config) if args.config else BuilderConfig()
    config = config.with_overrides(
        delete_unused=args.delete_unused,
        delete_empty=args.delete_empty,
        prefetch=args.prefetch,
        output_dict_info=args.dict_info,
    )

    build_dictionaries(
        sources_dir=args.sources,
        config=config,
        report_dir=args.report_dir,
    )


if __name__ == "__main__":
    main()
