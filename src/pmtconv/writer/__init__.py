"""出力ライターパッケージ

デコード済みPMT画像をBMPまたはPillow対応形式で書き出す。
"""

from pmtconv.writer.bmp import (
    FILE_BYTES,
    HEADER_BYTES,
    BMPFileHeader,
    BMPInfoHeader,
    ImageSizeMode,
    build_headers,
    encode_bmp,
    write_bmp,
)
from pmtconv.writer.image import save_image, to_pil_image

__all__ = [
    "BMPFileHeader",
    "BMPInfoHeader",
    "FILE_BYTES",
    "HEADER_BYTES",
    "ImageSizeMode",
    "build_headers",
    "encode_bmp",
    "save_image",
    "to_pil_image",
    "write_bmp",
]
