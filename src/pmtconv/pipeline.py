"""変換パイプラインの統合インターフェース定義

このモジュールは、PMTファイルからBMP/PNGファイルを生成する変換処理を
オーケストレーションする。DECODE -> PALETTE -> WRITE の各フェーズを順に実行し、
いずれかのフェーズで失敗した場合は変換全体を失敗として扱う。
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, Protocol

from pmtconv.codec.constants import GROUPS
from pmtconv.codec.decoder import PMTDecoder, PMTImage
from pmtconv.codec.errors import PMTError
from pmtconv.config import IMAGE_SIZE_MODES, OUTPUT_FORMATS
from pmtconv.logger import ConversionLogger, LogConfig, VerboseLevel
from pmtconv.writer.bmp import ImageSizeMode, write_bmp
from pmtconv.writer.image import save_image


class PipelinePhase(Enum):
    """パイプラインフェーズ

    1. DECODE: 6グループの読み取り・展開・プレーン再構成
    2. PALETTE: フッターのカラーテーブル読み取りと変換
    3. WRITE: 出力ファイルの書き込み
    """

    DECODE = "decode"
    PALETTE = "palette"
    WRITE = "write"


@dataclass(frozen=True)
class PipelineProgress:
    """パイプライン進捗情報

    Attributes:
        phase: 現在実行中のパイプラインフェーズ
        current: 現在の進捗（処理済みアイテム数）
        total: 総数（処理対象アイテム数）
        message: 追加の進捗メッセージ（オプション）
    """

    phase: PipelinePhase
    current: int
    total: int
    message: str = ""


class ProgressCallback(Protocol):
    """進捗コールバックのプロトコル"""

    def __call__(self, progress: PipelineProgress) -> None:
        """進捗情報を受け取るコールバック

        Args:
            progress: 現在の進捗情報
        """
        ...


@dataclass(frozen=True)
class PipelineConfig:
    """パイプライン設定

    Attributes:
        input_path: 入力PMTファイルパス
        output_path: 出力ファイルパス
        output_format: 出力形式（"bmp" または "png"）
        image_size: BMP情報ヘッダーのimage_sizeの書き方（"zero" または "exact"）
        verbose_level: 詳細出力レベル（-1=静音, 0=通常, 1=詳細, 2=デバッグ）
        log_file: ログ出力ファイルパス（Noneの場合はファイル出力なし）
    """

    input_path: Path
    output_path: Path
    output_format: str = "bmp"
    image_size: str = "zero"
    verbose_level: int = 0
    log_file: Path | None = None


@dataclass
class PipelineResult:
    """パイプライン実行結果

    Attributes:
        success: 変換が成功したか
        output_path: 生成されたファイルパス（失敗時はNone）
        error_message: エラーメッセージ（成功時は空文字列）
        phases_completed: 完了したフェーズのリスト
        statistics: 実行統計情報（処理時間、バイト数など）
    """

    success: bool
    output_path: Path | None
    error_message: str = ""
    phases_completed: list[PipelinePhase] = field(default_factory=list)
    statistics: dict[str, Any] = field(default_factory=dict)


class ConversionPipeline:
    """変換パイプラインオーケストレーター

    使用例:
        >>> config = PipelineConfig(
        ...     input_path=Path("scan.pmt"),
        ...     output_path=Path("scan.bmp"),
        ... )
        >>> pipeline = ConversionPipeline(config)
        >>> if not pipeline.validate():
        ...     result = pipeline.run()
    """

    def __init__(self, config: PipelineConfig, logger: ConversionLogger | None = None) -> None:
        """パイプラインを初期化する

        Args:
            config: パイプライン設定
            logger: ロガー（Noneの場合は設定から生成する）
        """
        self._config = config
        self._logger = logger
        self._decoder = PMTDecoder()
        self._pixels: bytes | None = None
        self._color_table: bytes | None = None
        self._statistics: dict[str, Any] = {}

    @property
    def config(self) -> PipelineConfig:
        """パイプライン設定を取得する"""
        return self._config

    def validate(self) -> list[str]:
        """設定を検証する

        Returns:
            エラーメッセージのリスト（問題がなければ空）
        """
        errors: list[str] = []
        input_path = self._config.input_path

        if not input_path.exists():
            errors.append(f"入力ファイルが見つかりません: {input_path}")
        elif input_path.is_dir():
            errors.append(f"入力はファイルである必要があります: {input_path}")

        if self._config.output_format not in OUTPUT_FORMATS:
            errors.append(f"未対応の出力形式です: {self._config.output_format}")

        if self._config.image_size not in IMAGE_SIZE_MODES:
            errors.append(f"未対応のimage_size指定です: {self._config.image_size}")

        if self._config.output_path.is_dir():
            errors.append(f"出力先がディレクトリです: {self._config.output_path}")

        return errors

    def run(self, progress_callback: ProgressCallback | None = None) -> PipelineResult:
        """パイプラインを実行する

        Args:
            progress_callback: 進捗通知用コールバック（オプション）

        Returns:
            パイプライン実行結果
        """
        errors = self.validate()
        if errors:
            return PipelineResult(success=False, output_path=None, error_message=errors[0])

        if self._logger is not None:
            logger = self._logger
        else:
            try:
                logger = ConversionLogger(
                    LogConfig(
                        verbose_level=VerboseLevel.from_count(self._config.verbose_level),
                        log_file=self._config.log_file,
                    )
                )
            except OSError as e:
                return PipelineResult(
                    success=False,
                    output_path=None,
                    error_message=f"ログファイルを開けません: {self._config.log_file}: {e}",
                )
        owns_logger = self._logger is None

        start_time = time.time()
        phases_completed: list[PipelinePhase] = []
        self._statistics = {}

        try:
            logger.info(f"変換開始: {self._config.input_path}")
            with open(self._config.input_path, "rb") as stream:
                for phase in PipelinePhase:
                    phase_start = time.time()
                    self._execute_phase(phase, stream, logger, progress_callback)
                    phases_completed.append(phase)
                    self._statistics[f"{phase.value}_time_seconds"] = round(
                        time.time() - phase_start, 2
                    )

            self._statistics["total_time_seconds"] = round(time.time() - start_time, 2)
            logger.log_summary(self._statistics)

            return PipelineResult(
                success=True,
                output_path=self._config.output_path,
                phases_completed=phases_completed,
                statistics=dict(self._statistics),
            )
        except (PMTError, OSError) as e:
            logger.error(str(e))
            # WRITEフェーズ中の失敗
            if PipelinePhase.PALETTE in phases_completed:
                self._remove_partial_output()
            return PipelineResult(
                success=False,
                output_path=None,
                error_message=str(e),
                phases_completed=phases_completed,
                statistics=dict(self._statistics),
            )
        finally:
            self._pixels = None
            self._color_table = None
            if owns_logger:
                logger.close()

    def _execute_phase(
        self,
        phase: PipelinePhase,
        stream: BinaryIO,
        logger: ConversionLogger,
        progress_callback: ProgressCallback | None,
    ) -> None:
        """個別フェーズを実行する"""
        match phase:
            case PipelinePhase.DECODE:
                self._execute_decode(stream, logger, progress_callback)
            case PipelinePhase.PALETTE:
                self._execute_palette(stream, logger, progress_callback)
            case PipelinePhase.WRITE:
                self._execute_write(logger, progress_callback)

    def _execute_decode(
        self,
        stream: BinaryIO,
        logger: ConversionLogger,
        progress_callback: ProgressCallback | None,
    ) -> None:
        """DECODEフェーズ: 6グループの展開と再構成"""
        compressed = 0

        def on_group(index: int, raw_size: int, decoded_size: int) -> None:
            nonlocal compressed
            compressed += raw_size
            logger.log_group(index, raw_size, decoded_size)
            if progress_callback is not None:
                progress_callback(
                    PipelineProgress(
                        phase=PipelinePhase.DECODE,
                        current=index + 1,
                        total=GROUPS,
                        message=f"グループ{index}を展開しました",
                    )
                )

        self._pixels = self._decoder.decode_groups(stream, on_group)
        self._statistics["compressed_size"] = compressed

    def _execute_palette(
        self,
        stream: BinaryIO,
        logger: ConversionLogger,
        progress_callback: ProgressCallback | None,
    ) -> None:
        """PALETTEフェーズ: カラーテーブルの読み取りと変換"""
        self._color_table = self._decoder.read_color_table(stream)
        logger.debug(f"カラーテーブル: {self._color_table.hex()}")
        if stream.read(1):
            logger.warning("フッター以降のデータは無視します")
        if progress_callback is not None:
            progress_callback(
                PipelineProgress(
                    phase=PipelinePhase.PALETTE,
                    current=1,
                    total=1,
                    message="カラーテーブルを変換しました",
                )
            )

    def _execute_write(
        self,
        logger: ConversionLogger,
        progress_callback: ProgressCallback | None,
    ) -> None:
        """WRITEフェーズ: 出力ファイルの書き込み"""
        assert self._pixels is not None and self._color_table is not None
        image = PMTImage(pixels=self._pixels, color_table=self._color_table)
        output_path = self._config.output_path

        if self._config.output_format == "png":
            size = save_image(image, output_path, "PNG")
        else:
            size = write_bmp(image, output_path, ImageSizeMode(self._config.image_size))

        self._statistics["output_path"] = str(output_path)
        self._statistics["output_size"] = size
        logger.verbose(f"出力: {output_path} ({size} バイト)")
        if progress_callback is not None:
            progress_callback(
                PipelineProgress(
                    phase=PipelinePhase.WRITE,
                    current=1,
                    total=1,
                    message=f"{output_path.name}を書き込みました",
                )
            )

    def _remove_partial_output(self) -> None:
        """書き込み途中で失敗した出力ファイルを削除する"""
        self._config.output_path.unlink(missing_ok=True)
