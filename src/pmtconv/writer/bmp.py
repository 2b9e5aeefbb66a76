"""BMP出力モジュール

デコード済みPMT画像を非圧縮4ビットインデックスBMPとして書き出す。
高さを負値にしてトップダウン（上の行から順）のピクセル配列とする。
"""

import struct
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pmtconv.codec.constants import (
    BMP_COLOR_TABLE_BYTES,
    PALETTE_ENTRIES,
    PIXEL_ARRAY_BYTES,
    PIXELS_PER_ROW,
    PLANES,
    ROWS,
)
from pmtconv.codec.decoder import PMTImage
from pmtconv.codec.errors import OutputWriteError


class ImageSizeMode(Enum):
    """情報ヘッダーのimage_sizeフィールドの書き方

    ZERO: 0を書く（非圧縮BMPで一般的な省略形）
    EXACT: ピクセル配列のバイト数を書く
    """

    ZERO = "zero"
    EXACT = "exact"


@dataclass(frozen=True)
class BMPFileHeader:
    """BMPファイルヘッダー（14バイト）"""

    FORMAT = "<2sIII"
    SIZE = 14

    file_size: int
    pixel_array_offset: int
    magic: bytes = b"BM"
    reserved: int = 0

    def pack(self) -> bytes:
        """リトルエンディアンのバイト列に変換する"""
        return struct.pack(
            self.FORMAT, self.magic, self.file_size, self.reserved, self.pixel_array_offset
        )


@dataclass(frozen=True)
class BMPInfoHeader:
    """BMP情報ヘッダー（BITMAPINFOHEADER、40バイト）"""

    FORMAT = "<IiiHHIIiiII"
    SIZE = 40

    width: int
    height: int
    bits_per_pixel: int
    colors: int
    image_size: int = 0
    color_planes: int = 1
    compression: int = 0
    horizontal_ppm: int = 0
    vertical_ppm: int = 0
    important_colors: int = 0

    def pack(self) -> bytes:
        """リトルエンディアンのバイト列に変換する"""
        return struct.pack(
            self.FORMAT,
            self.SIZE,
            self.width,
            self.height,
            self.color_planes,
            self.bits_per_pixel,
            self.compression,
            self.image_size,
            self.horizontal_ppm,
            self.vertical_ppm,
            self.colors,
            self.important_colors,
        )


HEADER_BYTES: int = BMPFileHeader.SIZE + BMPInfoHeader.SIZE + BMP_COLOR_TABLE_BYTES
"""ピクセル配列までのバイト数（ファイルヘッダー + 情報ヘッダー + カラーテーブル）"""

FILE_BYTES: int = HEADER_BYTES + PIXEL_ARRAY_BYTES
"""出力BMPファイル全体のバイト数"""


def build_headers(
    image_size_mode: ImageSizeMode = ImageSizeMode.ZERO,
) -> tuple[BMPFileHeader, BMPInfoHeader]:
    """PMT画像用のBMPヘッダーを生成する

    Args:
        image_size_mode: image_sizeフィールドの書き方

    Returns:
        ファイルヘッダーと情報ヘッダーのタプル
    """
    file_header = BMPFileHeader(file_size=FILE_BYTES, pixel_array_offset=HEADER_BYTES)
    info_header = BMPInfoHeader(
        width=PIXELS_PER_ROW,
        # 負の高さはトップダウンの行順を表す
        height=-ROWS,
        bits_per_pixel=PLANES,
        colors=PALETTE_ENTRIES,
        image_size=PIXEL_ARRAY_BYTES if image_size_mode == ImageSizeMode.EXACT else 0,
    )
    return file_header, info_header


def encode_bmp(image: PMTImage, image_size_mode: ImageSizeMode = ImageSizeMode.ZERO) -> bytes:
    """PMT画像をBMP形式のバイト列に変換する"""
    file_header, info_header = build_headers(image_size_mode)
    return b"".join(
        (file_header.pack(), info_header.pack(), image.color_table, image.pixels)
    )


def write_bmp(
    image: PMTImage,
    path: Path,
    image_size_mode: ImageSizeMode = ImageSizeMode.ZERO,
) -> int:
    """PMT画像をBMPファイルに書き出す

    Args:
        image: デコード済みPMT画像
        path: 出力先パス
        image_size_mode: image_sizeフィールドの書き方

    Returns:
        書き込んだバイト数

    Raises:
        OutputWriteError: ファイルを作成または書き込みできなかった場合
    """
    data = encode_bmp(image, image_size_mode)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise OutputWriteError(f"出力ファイルに書き込めません: {path}: {e}") from e
    return len(data)
