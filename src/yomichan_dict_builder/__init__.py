"""Yomichan 辞書アーカイブの取り込みとタグ統合."""

__version__ = "0.1.0"
