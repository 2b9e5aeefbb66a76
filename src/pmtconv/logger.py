"""進捗表示およびログ出力のインターフェース定義

このモジュールは、pmtconvの変換進捗表示とログ出力のためのインターフェースを定義する。
VerboseLevel (詳細ログレベル)に応じた出力制御を行い、
CLIでの変換進捗をユーザーにわかりやすく表示するために使用される。
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, TextIO

if TYPE_CHECKING:
    from pmtconv.pipeline import PipelinePhase


class VerboseLevel(IntEnum):
    """詳細ログレベル

    QUIET: エラーのみ出力
    NORMAL: 進捗とサマリ出力
    VERBOSE: グループごとの処理結果も出力（-vオプション）
    DEBUG: ヘッダー値などの内部情報も出力（-vvオプション）
    """

    QUIET = -1
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2

    @classmethod
    def from_count(cls, level: int) -> VerboseLevel:
        """-vの回数などの整数をQUIETからDEBUGの範囲に収めて変換する"""
        return cls(max(cls.QUIET, min(level, cls.DEBUG)))


class ProgressDisplay(Protocol):
    """進捗表示のプロトコル"""

    def start(self, phase: PipelinePhase, total: int) -> None:
        """フェーズ開始を表示する

        Args:
            phase: 開始するパイプラインフェーズ
            total: 処理対象の総数
        """
        ...

    def update(self, current: int, message: str = "") -> None:
        """進捗を更新する

        Args:
            current: 現在の進捗（処理済みアイテム数）
            message: 追加の進捗メッセージ（オプション）
        """
        ...

    def finish(self, success: bool, message: str = "") -> None:
        """フェーズ終了を表示する

        Args:
            success: フェーズが成功したか
            message: 終了メッセージ（オプション）
        """
        ...


@dataclass
class LogConfig:
    """ログ設定

    Attributes:
        verbose_level: ログの詳細度レベル
        log_file: ログ出力先ファイルパス（Noneの場合はファイル出力なし）
        use_emoji: emoji表示を使用するか
    """

    verbose_level: VerboseLevel = VerboseLevel.NORMAL
    log_file: Path | None = None
    use_emoji: bool = True


class ConversionLogger:
    """変換ログ出力クラス

    VerboseLevelに応じてメッセージのフィルタリングを行い、
    進捗表示インスタンスの作成も担当する。

    使用例:
        >>> config = LogConfig(verbose_level=VerboseLevel.VERBOSE)
        >>> with ConversionLogger(config) as logger:
        ...     logger.info("変換を開始します")
    """

    _ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;]*m")

    def __init__(self, config: LogConfig) -> None:
        """ロガーを初期化する

        Args:
            config: ログ設定
        """
        self._config = config
        self._log_file: TextIO | None = None
        if config.log_file:
            # クラス自体がコンテキストマネージャとして動作し、__exit__でファイルを閉じる
            self._log_file = open(config.log_file, "w", encoding="utf-8")  # noqa: SIM115

    def __enter__(self) -> ConversionLogger:
        """コンテキストマネージャのエントリポイント"""
        return self

    def __exit__(self, *args: object) -> None:
        """コンテキストマネージャの終了処理"""
        self.close()

    def close(self) -> None:
        """ログファイルを閉じる"""
        if self._log_file:
            self._log_file.close()
            self._log_file = None

    @property
    def config(self) -> LogConfig:
        """ログ設定を取得する"""
        return self._config

    def _print(self, message: str, file: TextIO | None = None) -> None:
        if file is None:
            file = sys.stdout
        print(message, file=file)

    def _log_to_file(self, level: str, message: str) -> None:
        if self._log_file:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            clean_message = self._strip_ansi(message)
            self._log_file.write(f"[{timestamp}] {level}: {clean_message}\n")
            self._log_file.flush()

    def _strip_ansi(self, text: str) -> str:
        return self._ANSI_ESCAPE_PATTERN.sub("", text)

    def info(self, message: str) -> None:
        """情報メッセージを出力する（NORMAL以上）"""
        if self._config.verbose_level >= VerboseLevel.NORMAL:
            self._print(message)
        self._log_to_file("INFO", message)

    def verbose(self, message: str) -> None:
        """詳細メッセージを出力する（VERBOSE以上）"""
        if self._config.verbose_level >= VerboseLevel.VERBOSE:
            self._print(message)
        self._log_to_file("VERBOSE", message)

    def debug(self, message: str) -> None:
        """デバッグメッセージを出力する（DEBUG以上）"""
        if self._config.verbose_level >= VerboseLevel.DEBUG:
            self._print(message)
        self._log_to_file("DEBUG", message)

    def error(self, message: str) -> None:
        """エラーメッセージを出力する（常に出力）"""
        self._print(f"エラー: {message}", file=sys.stderr)
        self._log_to_file("ERROR", message)

    def warning(self, message: str) -> None:
        """警告メッセージを出力する（QUIET以上）"""
        if self._config.verbose_level > VerboseLevel.QUIET:
            self._print(f"警告: {message}")
        self._log_to_file("WARNING", message)

    def create_progress(self) -> ProgressDisplay:
        """進捗表示インスタンスを作成する"""
        return ConsoleProgressDisplay(use_emoji=self._config.use_emoji)

    def log_group(self, index: int, raw_size: int, decoded_size: int) -> None:
        """グループの展開結果をログする（VERBOSE以上）

        Args:
            index: グループ番号（0始まり）
            raw_size: 圧縮データのバイト数
            decoded_size: 展開後のバイト数
        """
        self.verbose(f"グループ{index}: {raw_size} -> {decoded_size} バイト")

    def log_summary(self, statistics: dict[str, Any]) -> None:
        """変換サマリを出力する（NORMAL以上）

        Args:
            statistics: 変換統計情報
        """
        emoji = "✅" if self._config.use_emoji else "[OK]"
        self.info(f"{emoji} Conversion complete!")
        if "output_path" in statistics:
            size_kb = statistics.get("output_size", 0) / 1024
            self.info(f"   Output: {statistics['output_path']} ({size_kb:.1f} KB)")
        if "compressed_size" in statistics:
            self.info(f"   Compressed input: {statistics['compressed_size']} bytes")


class ConsoleProgressDisplay:
    """コンソール進捗表示

    変換パイプラインの各フェーズの進捗をコンソールに表示するクラス。
    """

    PHASE_EMOJI: dict[str, str] = {
        "decode": "\U0001f4e6",
        "palette": "\U0001f3a8",
        "write": "\U0001f4be",
    }

    PHASE_NAME: dict[str, str] = {
        "decode": "Decoding groups",
        "palette": "Converting color table",
        "write": "Writing image",
    }

    BAR_WIDTH: int = 40

    def __init__(self, use_emoji: bool = True) -> None:
        """進捗表示を初期化する

        Args:
            use_emoji: 絵文字を使用するか
        """
        self._use_emoji = use_emoji
        self._phase: PipelinePhase | None = None
        self._total = 0
        self._current = 0

    def start(self, phase: PipelinePhase, total: int) -> None:
        """フェーズ開始を表示する"""
        self._phase = phase
        self._total = total
        self._current = 0
        emoji = self.PHASE_EMOJI.get(phase.value, "") if self._use_emoji else ""
        name = self.PHASE_NAME.get(phase.value, str(phase))
        prefix = f"{emoji} " if emoji else ""
        print(f"{prefix}{name}...")

    def update(self, current: int, message: str = "") -> None:
        """進捗を更新する"""
        self._current = current
        if self._total > 0:
            percent = int((current / self._total) * 100)
            filled = int(self.BAR_WIDTH * current / self._total)
            bar = "█" * filled + "░" * (self.BAR_WIDTH - filled)
            msg_part = f" {message}" if message else ""
            print(f"\r   [{bar}] {percent}%{msg_part}", end="", flush=True)

    def finish(self, success: bool, message: str = "") -> None:
        """フェーズ終了を表示する"""
        full_bar = "█" * self.BAR_WIDTH
        if success:
            mark = "✓" if self._use_emoji else "done"
            print(f"\r   [{full_bar}] 100% {mark}")
        else:
            mark = "✗" if self._use_emoji else "failed"
            msg_part = f": {message}" if message else ""
            print(f"\r   [{full_bar}] {mark}{msg_part}")
