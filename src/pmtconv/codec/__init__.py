"""PMT画像デコーダーパッケージ

旧式ハンディスキャナーが出力するPMT形式の画像をデコードする。
"""

from pmtconv.codec.decoder import PMTDecoder, PMTImage, PMTInfo
from pmtconv.codec.errors import (
    BufferTooSmallError,
    InputOverrunError,
    OutputOverrunError,
    OutputWriteError,
    PMTError,
    SizeMismatchError,
    TruncatedInputError,
)
from pmtconv.codec.palette import convert_color_table, palette_to_rgb
from pmtconv.codec.planes import PlaneReassembler, pixel_value
from pmtconv.codec.reader import GroupReader
from pmtconv.codec.rle import RLEDecoder

__all__ = [
    "BufferTooSmallError",
    "GroupReader",
    "InputOverrunError",
    "OutputOverrunError",
    "OutputWriteError",
    "PMTDecoder",
    "PMTError",
    "PMTImage",
    "PMTInfo",
    "PlaneReassembler",
    "RLEDecoder",
    "SizeMismatchError",
    "TruncatedInputError",
    "convert_color_table",
    "palette_to_rgb",
    "pixel_value",
]
