"""PMTデコーダーモジュール

PMTファイル全体をデコードし、4ビットインデックスのピクセル配列と
BMP形式のカラーテーブルを生成する。

PMTファイルの構造:
- グループ x 6: グループ長(2, LE) + RLE圧縮データ
- フッター: 未使用領域(16) + カラーテーブル(48, R/G/B 6ビット x 16)
"""

import io
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Protocol

from pmtconv.codec.constants import (
    BMP_COLOR_TABLE_BYTES,
    FOOTER_RESERVED_BYTES,
    GROUP_BYTES,
    GROUPS,
    PIXEL_ARRAY_BYTES,
    PIXELS_PER_ROW,
    PMT_COLOR_TABLE_BYTES,
    ROW_BYTES,
    ROWS,
)
from pmtconv.codec.errors import PMTError, SizeMismatchError
from pmtconv.codec.palette import convert_color_table, palette_to_rgb
from pmtconv.codec.planes import PlaneReassembler
from pmtconv.codec.reader import GroupReader, read_exact
from pmtconv.codec.rle import RLEDecoder


class GroupDecodedCallback(Protocol):
    """グループ処理完了の通知を受け取るコールバック"""

    def __call__(self, index: int, raw_size: int, decoded_size: int) -> None:
        """グループの処理完了を受け取る

        Args:
            index: グループ番号（0始まり）
            raw_size: 圧縮データのバイト数
            decoded_size: 展開後のバイト数
        """
        ...


@dataclass(frozen=True)
class PMTImage:
    """デコード済みPMT画像

    Attributes:
        pixels: 4ビットインデックスを2ピクセル/バイトで詰めたピクセル配列（上の行から順）
        color_table: BMP形式のカラーテーブル（B,G,R,0 x 16）
    """

    pixels: bytes
    color_table: bytes

    @property
    def width(self) -> int:
        """画像の幅（ピクセル）"""
        return PIXELS_PER_ROW

    @property
    def height(self) -> int:
        """画像の高さ（ピクセル）"""
        return ROWS

    def pixel(self, x: int, y: int) -> int:
        """指定座標のパレットインデックスを返す"""
        packed = self.pixels[y * ROW_BYTES + x // 2]
        return packed & 0x0F if x % 2 else packed >> 4

    def palette_rgb(self) -> list[tuple[int, int, int]]:
        """カラーテーブルをRGBタプルのリストとして返す"""
        return palette_to_rgb(self.color_table)


@dataclass(frozen=True)
class PMTInfo:
    """PMTファイルの構成情報

    Attributes:
        group_sizes: 各グループの圧縮データ長（バイト）
        raw_color_table: PMT形式のカラーテーブル（R,G,B 6ビット x 16）
    """

    group_sizes: tuple[int, ...]
    raw_color_table: bytes

    @property
    def compressed_size(self) -> int:
        """圧縮データの合計バイト数"""
        return sum(self.group_sizes)

    def palette_rgb(self) -> list[tuple[int, int, int]]:
        """カラーテーブルを8ビットRGBタプルのリストとして返す"""
        return palette_to_rgb(convert_color_table(self.raw_color_table))


class PMTDecoder:
    """PMT画像デコーダー

    グループ読み取り、RLE展開、プレーン再構成を6グループ分順に行い、
    最後にカラーテーブルを変換する。いずれかの段階で失敗した時点で
    処理全体を中断する。
    """

    def __init__(self) -> None:
        """PMTデコーダーを初期化する"""
        self._reader = GroupReader()
        self._rle = RLEDecoder()
        self._reassembler = PlaneReassembler()

    def decode(self, stream: BinaryIO, on_group: GroupDecodedCallback | None = None) -> PMTImage:
        """PMTデータをデコードする

        Args:
            stream: 先頭に位置するPMT入力ストリーム
            on_group: グループ処理完了ごとに呼ばれるコールバック（オプション）

        Returns:
            デコードされたPMTImage

        Raises:
            PMTError: 読み取り・展開のいずれかに失敗した場合
        """
        pixels = self.decode_groups(stream, on_group)
        color_table = self.read_color_table(stream)
        return PMTImage(pixels=pixels, color_table=color_table)

    def decode_groups(
        self, stream: BinaryIO, on_group: GroupDecodedCallback | None = None
    ) -> bytes:
        """6グループを順に読み取り、展開・再構成したピクセル配列を返す

        生データ用と展開後データ用の作業バッファは全グループで使い回す。
        グループiの再構成結果はピクセル配列の[i * GROUP_BYTES, (i + 1) * GROUP_BYTES)に書き込む。

        Raises:
            PMTError: 読み取り・展開のいずれかに失敗した場合
        """
        raw_group = bytearray(GROUP_BYTES)
        decoded_group = bytearray(GROUP_BYTES)
        pixels = bytearray(PIXEL_ARRAY_BYTES)
        pixel_view = memoryview(pixels)

        written = 0
        for index in range(GROUPS):
            try:
                raw_size = self._reader.read_into(stream, raw_group)
                decoded_size = self._rle.decode_into(
                    memoryview(raw_group)[:raw_size], decoded_group, GROUP_BYTES
                )
                start = index * GROUP_BYTES
                written += self._reassembler.reassemble_into(
                    decoded_group, pixel_view[start : start + GROUP_BYTES]
                )
            except PMTError as e:
                raise type(e)(f"グループ{index}: {e}") from e

            if on_group is not None:
                on_group(index, raw_size, decoded_size)

        if written != PIXEL_ARRAY_BYTES:
            raise SizeMismatchError(f"ピクセル配列のバイト数が不正です: {written}")

        return bytes(pixels)

    def decode_bytes(self, data: bytes) -> PMTImage:
        """PMT形式のバイト列をデコードする"""
        return self.decode(io.BytesIO(data))

    def decode_file(self, path: Path, on_group: GroupDecodedCallback | None = None) -> PMTImage:
        """PMTファイルをデコードする

        Raises:
            FileNotFoundError: ファイルが存在しない場合
            PMTError: デコードに失敗した場合
        """
        if not path.exists():
            raise FileNotFoundError(f"ファイルが見つかりません: {path}")

        with open(path, "rb") as f:
            return self.decode(f, on_group)

    def read_color_table(self, stream: BinaryIO) -> bytes:
        """フッターを読み、BMP形式に変換したカラーテーブルを返す

        Raises:
            TruncatedInputError: フッターが不足している場合
        """
        table = convert_color_table(self._read_raw_color_table(stream))
        assert len(table) == BMP_COLOR_TABLE_BYTES
        return table

    def parse_info(self, stream: BinaryIO) -> PMTInfo:
        """展開せずにグループ構成とカラーテーブルを読み取る

        Raises:
            PMTError: グループ構成またはフッターが不正な場合
        """
        sizes: list[int] = []
        for index in range(GROUPS):
            try:
                sizes.append(self._reader.skip(stream))
            except PMTError as e:
                raise type(e)(f"グループ{index}: {e}") from e

        return PMTInfo(group_sizes=tuple(sizes), raw_color_table=self._read_raw_color_table(stream))

    def is_valid(self, data: bytes) -> bool:
        """グループ構成とフッターが揃ったPMTデータかどうかを判定する"""
        try:
            self.parse_info(io.BytesIO(data))
        except PMTError:
            return False
        return True

    def _read_raw_color_table(self, stream: BinaryIO) -> bytes:
        read_exact(stream, FOOTER_RESERVED_BYTES, "フッター予約領域")
        return read_exact(stream, PMT_COLOR_TABLE_BYTES, "カラーテーブル")
