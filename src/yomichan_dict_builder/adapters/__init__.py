"""辞書アーカイブ用のソースアダプタ群."""

from .base_adapter import ArchiveSource, BaseAdapter
from .directory_adapter import Directory_Adapter
from .zip_adapter import Zip_Adapter

__all__ = [
    "ArchiveSource",
    "BaseAdapter",
    "Directory_Adapter",
    "Zip_Adapter",
]
