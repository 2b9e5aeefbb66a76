"""CLI entry point for pmtconv."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from pmtconv import __version__
from pmtconv.codec.decoder import PMTDecoder
from pmtconv.codec.errors import PMTError
from pmtconv.config import ConfigError, get_default_config, load_config
from pmtconv.logger import ConversionLogger, LogConfig, ProgressDisplay, VerboseLevel
from pmtconv.pipeline import (
    ConversionPipeline,
    PipelineConfig,
    PipelinePhase,
    PipelineProgress,
    ProgressCallback,
)
from pmtconv.types import ExitCode

app = typer.Typer(help="PMT形式のスキャン画像をBMPに変換するCLIツール")
console = Console()


def _progress_display_callback(display: ProgressDisplay) -> ProgressCallback:
    """進捗表示をパイプラインの進捗コールバックに変換する"""
    current_phase: list[PipelinePhase] = []

    def callback(progress: PipelineProgress) -> None:
        if not current_phase or current_phase[0] != progress.phase:
            current_phase[:] = [progress.phase]
            display.start(progress.phase, progress.total)
        display.update(progress.current, progress.message)
        if progress.current >= progress.total:
            display.finish(True)

    return callback


@app.command()
def convert(
    input_path: Annotated[Path, typer.Argument(help="入力PMTファイルパス")],
    output_path: Annotated[Path, typer.Argument(help="出力ファイルパス")],
    output_format: Annotated[
        str | None, typer.Option("-f", "--format", help="出力形式（bmp/png）")
    ] = None,
    config_path: Annotated[
        Path | None, typer.Option("-c", "--config", help="設定ファイル（YAML）")
    ] = None,
    verbose: Annotated[int, typer.Option("-v", "--verbose", count=True, help="詳細ログ出力")] = 0,
    quiet: Annotated[bool, typer.Option("-q", "--quiet", help="エラー以外を出力しない")] = False,
    log_file: Annotated[Path | None, typer.Option(help="ログファイル出力先")] = None,
) -> None:
    """PMTファイルをBMP（またはPNG）に変換する"""
    try:
        settings = load_config(config_path) if config_path else get_default_config()
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.INVALID_INPUT) from e

    verbose_level = -1 if quiet else max(verbose, settings.logging.verbose_level)

    config = PipelineConfig(
        input_path=input_path,
        output_path=output_path,
        output_format=(output_format or settings.output.format).lower(),
        image_size=settings.output.image_size,
        verbose_level=verbose_level,
        log_file=log_file or settings.logging.log_file,
    )

    pipeline_errors = ConversionPipeline(config).validate()
    if pipeline_errors:
        for error in pipeline_errors:
            console.print(f"[red]Error: {error}[/red]")
        raise typer.Exit(ExitCode.ERROR)

    try:
        logger = ConversionLogger(
            LogConfig(
                verbose_level=VerboseLevel.from_count(verbose_level),
                log_file=config.log_file,
            )
        )
    except OSError as e:
        console.print(f"[red]Error: ログファイルを開けません: {config.log_file}: {e}[/red]")
        raise typer.Exit(ExitCode.ERROR) from e

    def verbose_callback(progress: PipelineProgress) -> None:
        console.print(
            f"[blue]{progress.phase.value}[/blue]: {progress.message} "
            f"({progress.current}/{progress.total})"
        )

    with logger:
        progress_callback: ProgressCallback | None = None
        if not quiet:
            progress_callback = (
                verbose_callback
                if verbose > 0
                else _progress_display_callback(logger.create_progress())
            )

        result = ConversionPipeline(config, logger).run(progress_callback=progress_callback)

    if result.success:
        if not quiet:
            console.print(f"[green]変換完了: {result.output_path}[/green]")
        raise typer.Exit(ExitCode.SUCCESS)
    else:
        console.print(f"[red]変換失敗: {result.error_message}[/red]")
        raise typer.Exit(ExitCode.ERROR)


@app.command()
def info(
    input_path: Annotated[Path, typer.Argument(help="解析対象のPMTファイルパス")],
) -> None:
    """PMTファイルのグループ構成とカラーテーブルを表示する"""
    if not input_path.is_file():
        console.print(f"[red]Error: ファイルが見つかりません: {input_path}[/red]")
        raise typer.Exit(ExitCode.ERROR)

    decoder = PMTDecoder()
    try:
        with open(input_path, "rb") as f:
            pmt_info = decoder.parse_info(f)
    except PMTError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.ERROR) from e

    groups = Table(title="Groups")
    groups.add_column("Group", justify="right", style="cyan")
    groups.add_column("Compressed", justify="right", style="green")
    for index, size in enumerate(pmt_info.group_sizes):
        groups.add_row(str(index), f"{size} B")
    groups.add_section()
    groups.add_row("Total", f"{pmt_info.compressed_size} B")
    console.print(groups)

    palette = Table(title="Color Table")
    palette.add_column("Index", justify="right", style="cyan")
    palette.add_column("RGB", justify="left")
    palette.add_column("", justify="left")
    for index, (r, g, b) in enumerate(pmt_info.palette_rgb()):
        palette.add_row(str(index), f"#{r:02x}{g:02x}{b:02x}", f"[on rgb({r},{g},{b})]    [/]")
    console.print(palette)
    raise typer.Exit(ExitCode.SUCCESS)


def version_callback(value: bool) -> None:
    """バージョン表示コールバック"""
    if value:
        typer.echo(f"pmtconv {__version__}")
        raise typer.Exit(ExitCode.SUCCESS)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="バージョンを表示する",
        ),
    ] = False,
) -> None:
    """pmtconv CLI - PMTスキャン画像をBMPに変換"""
    pass
