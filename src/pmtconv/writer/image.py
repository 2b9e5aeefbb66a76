"""Pillow画像変換モジュール

デコード済みPMT画像をPIL.Imageに変換し、PNG等の形式で保存する。
"""

from pathlib import Path

from PIL import Image

from pmtconv.codec.decoder import PMTImage
from pmtconv.codec.errors import OutputWriteError


def to_pil_image(image: PMTImage) -> Image.Image:
    """PMT画像をパレットモードのPIL.Imageに変換する

    ピクセル配列は4ビットインデックスを上位ニブルから詰めた形式のため、
    rawモード"P;4"で展開する。

    Args:
        image: デコード済みPMT画像

    Returns:
        モード"P"のPIL.Imageオブジェクト
    """
    pil_image = Image.frombytes("P", (image.width, image.height), image.pixels, "raw", "P;4")
    palette: list[int] = []
    for rgb in image.palette_rgb():
        palette.extend(rgb)
    pil_image.putpalette(palette)
    return pil_image


def save_image(image: PMTImage, path: Path, fmt: str = "PNG") -> int:
    """PMT画像をPillowが対応する形式で保存する

    Args:
        image: デコード済みPMT画像
        path: 出力先パス
        fmt: Pillowの形式名（例: "PNG"）

    Returns:
        書き込まれたファイルのバイト数

    Raises:
        OutputWriteError: ファイルを作成または書き込みできなかった場合
    """
    pil_image = to_pil_image(image)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        pil_image.save(path, fmt)
    except OSError as e:
        raise OutputWriteError(f"出力ファイルに書き込めません: {path}: {e}") from e
    finally:
        pil_image.close()
    return path.stat().st_size
