"""Configuration module for pmtconv."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

OUTPUT_FORMATS = ("bmp", "png")
IMAGE_SIZE_MODES = ("zero", "exact")
VERBOSE_LEVEL_MIN = -1
VERBOSE_LEVEL_MAX = 2


class ConfigError(Exception):
    """設定ファイル読み込みエラー"""

    pass


@dataclass(frozen=True)
class OutputConfig:
    """出力設定

    Attributes:
        format: 出力形式（"bmp" または "png"）
        image_size: BMP情報ヘッダーのimage_sizeの書き方（"zero" または "exact"）
    """

    format: str = "bmp"
    image_size: str = "zero"


@dataclass(frozen=True)
class LoggingConfig:
    """ログ設定"""

    verbose_level: int = 0
    log_file: Path | None = None


@dataclass(frozen=True)
class PMTConvConfig:
    """ルート設定"""

    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: Path) -> PMTConvConfig:
    """設定ファイルを読み込む

    Args:
        path: 設定ファイルパス

    Returns:
        PMTConvConfig: 読み込んだ設定（デフォルトとマージ済み）

    Raises:
        ConfigError: ファイル読み込み、パース、または値の検証エラー
    """
    if not path.exists():
        raise ConfigError(f"設定ファイルが見つかりません: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML解析エラー: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"設定ファイルを読み込めません: {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("設定ファイルはYAMLのマッピング形式である必要があります")

    default = get_default_config()

    return PMTConvConfig(
        output=_merge_output_config(data.get("output", {}), default.output),
        logging=_merge_logging_config(data.get("logging", {}), default.logging),
    )


def get_default_config() -> PMTConvConfig:
    """デフォルト設定を取得する"""
    return PMTConvConfig()


def _merge_output_config(data: dict[str, Any], default: OutputConfig) -> OutputConfig:
    """出力設定をマージする"""
    if not isinstance(data, dict):
        return default

    output_format = str(data.get("format", default.format)).lower()
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"未対応の出力形式です: {output_format}")

    image_size = str(data.get("image_size", default.image_size)).lower()
    if image_size not in IMAGE_SIZE_MODES:
        raise ConfigError(f"image_sizeは {' / '.join(IMAGE_SIZE_MODES)} のいずれかです: {image_size}")

    return OutputConfig(format=output_format, image_size=image_size)


def _merge_logging_config(data: dict[str, Any], default: LoggingConfig) -> LoggingConfig:
    """ログ設定をマージする"""
    if not isinstance(data, dict):
        return default

    verbose_level = data.get("verbose_level", default.verbose_level)
    # boolはintのサブクラスなので明示的に除外する
    if (
        isinstance(verbose_level, bool)
        or not isinstance(verbose_level, int)
        or not VERBOSE_LEVEL_MIN <= verbose_level <= VERBOSE_LEVEL_MAX
    ):
        raise ConfigError(
            f"verbose_levelは{VERBOSE_LEVEL_MIN}から{VERBOSE_LEVEL_MAX}の整数です: {verbose_level!r}"
        )

    log_file = data.get("log_file")
    return LoggingConfig(
        verbose_level=verbose_level,
        log_file=Path(log_file) if log_file else default.log_file,
    )
