"""ビルダー設定.

タグ統合や取り込みの動作を JSON ファイルで指定できるようにします。
CLI 引数で指定した値はファイルの値より優先されます。

JSON形式:
    {
        "delete_unused": false,
        "delete_empty": true,
        "prefetch": false,
        "output_dict_info": false
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path

from loguru import logger


@dataclass(frozen=True)
class BuilderConfig:
    """ビルダー設定.

    Attributes:
        delete_unused: 参照されていないタグを統合結果から削除する
        delete_empty: 名前以外が空のタグ（未定義参照から生成されたもの）を削除する
        prefetch: アーカイブ内のバンクファイルを同時に読み込む
        output_dict_info: 取り込んだ辞書ごとの詳細な概要をログに出す
    """

    delete_unused: bool = False
    delete_empty: bool = False
    prefetch: bool = False
    output_dict_info: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> BuilderConfig:
        """辞書から生成する.

        Raises:
            ValueError: 未知のキー、または bool 以外の値が含まれている場合
        """
        valid_keys = {f.name for f in fields(cls)}
        for key, value in data.items():
            if key not in valid_keys:
                msg = f"Unknown config key '{key}'. Valid keys: {sorted(valid_keys)}"
                raise ValueError(msg)
            if not isinstance(value, bool):
                msg = f"Config key '{key}' must be a boolean, got {type(value).__name__}"
                raise ValueError(msg)
        return cls(**data)  # type: ignore[arg-type]

    def with_overrides(self, **overrides: bool | None) -> BuilderConfig:
        """None 以外の値で上書きした設定を返す（CLI 引数の反映用）."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)


def load_config(config_path: Path | str) -> BuilderConfig:
    """JSONファイルから設定を読み込む.

    Args:
        config_path: 設定JSONファイルのパス

    Returns:
        設定オブジェクト

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        ValueError: JSON形式が不正、または無効なキー・値が含まれている場合
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON in config file: {config_path}"
        raise ValueError(msg) from e

    if not isinstance(data, dict):
        msg = f"Config file must contain a JSON object, got {type(data)}"
        raise ValueError(msg)

    config = BuilderConfig.from_dict(data)
    logger.info(f"Loaded config from {config_path}")
    return config
