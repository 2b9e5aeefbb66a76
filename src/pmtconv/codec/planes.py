"""プレーン再構成モジュール

展開済みグループの4つのビットプレーンを、1バイトに2ピクセルを詰めた
4ビットインデックス行に再構成する。

展開済みグループのレイアウト:
- 行オフセット = row * ROW_BYTES
- プレーンオフセット = 行オフセット + plane * PLANE_ROW_BYTES
- 各プレーン内は1ビット/ピクセル、バイト内は最上位ビットが先頭ピクセル
"""

from pmtconv.codec.constants import (
    GROUP_BYTES,
    PIXELS_PER_ROW,
    PLANE_ROW_BYTES,
    PLANES,
    ROW_BYTES,
    ROWS_PER_GROUP,
)


def pixel_value(decoded: bytes | bytearray | memoryview, row_offset: int, position: int) -> int:
    """行内の指定ピクセルの4ビット値を計算する

    各プレーンの同じ位置のビットを集め、プレーン0を最下位ビットとして
    組み合わせる。

    Args:
        decoded: 展開済みグループデータ
        row_offset: 行の先頭オフセット
        position: 行内のピクセル位置（0始まり）

    Returns:
        0〜15のピクセル値
    """
    byte_index = position // 8
    bit_index = 7 - (position % 8)

    value = 0
    for plane in range(PLANES):
        plane_byte = decoded[row_offset + plane * PLANE_ROW_BYTES + byte_index]
        value += ((plane_byte >> bit_index) & 1) << plane
    return value


class PlaneReassembler:
    """プレーン再構成クラス

    偶数位置のピクセルを上位ニブル、続く奇数位置のピクセルを下位ニブルに
    詰める。1行840ピクセルは420バイトにちょうど収まる。
    """

    def reassemble_row(
        self,
        decoded: bytes | bytearray | memoryview,
        row_offset: int,
        dest: bytearray | memoryview,
        dest_offset: int,
    ) -> int:
        """1行分を再構成してdestに書き込む

        Returns:
            書き込み後のdestオフセット
        """
        packed = 0
        for position in range(PIXELS_PER_ROW):
            value = pixel_value(decoded, row_offset, position)
            if position % 2:
                dest[dest_offset] = packed | value
                dest_offset += 1
            else:
                packed = value << 4
        return dest_offset

    def reassemble_into(
        self,
        decoded: bytes | bytearray | memoryview,
        dest: bytearray | memoryview,
    ) -> int:
        """展開済みグループ全体を再構成してdestに書き込む

        Args:
            decoded: 展開済みグループ（GROUP_BYTESバイト）
            dest: 書き込み先（GROUP_BYTESバイト以上）

        Returns:
            書き込んだバイト数
        """
        assert len(decoded) >= GROUP_BYTES, "展開済みグループのサイズが不足しています"
        assert len(dest) >= GROUP_BYTES, "出力先のサイズが不足しています"

        dest_offset = 0
        for row in range(ROWS_PER_GROUP):
            dest_offset = self.reassemble_row(decoded, row * ROW_BYTES, dest, dest_offset)
        return dest_offset

    def reassemble(self, decoded: bytes | bytearray | memoryview) -> bytes:
        """展開済みグループを再構成し、新しいバイト列として返す"""
        dest = bytearray(GROUP_BYTES)
        self.reassemble_into(decoded, dest)
        return bytes(dest)
