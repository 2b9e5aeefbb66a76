"""カラーテーブル変換モジュール

PMTのカラーテーブルは16エントリ x R,G,B（各6ビット有効）で格納される。
BMPのカラーテーブルは16エントリ x B,G,R,0（各8ビット）を要求する。
"""

from pmtconv.codec.constants import BMP_COLOR_TABLE_BYTES, PALETTE_ENTRIES, PMT_COLOR_TABLE_BYTES


def convert_color_table(raw: bytes | bytearray | memoryview) -> bytes:
    """PMTカラーテーブルをBMPカラーテーブルに変換する

    チャンネル順をR,G,BからB,G,Rに並べ替え、2ビット左シフトで
    6ビット値を8ビット範囲に拡大し、末尾に予約バイト0を付加する。

    Args:
        raw: PMTカラーテーブル（48バイト）

    Returns:
        BMPカラーテーブル（64バイト）
    """
    assert len(raw) == PMT_COLOR_TABLE_BYTES, "カラーテーブルのサイズが不正です"

    table = bytearray(BMP_COLOR_TABLE_BYTES)
    for i in range(PALETTE_ENTRIES):
        for c in range(3):
            table[i * 4 + c] = (raw[i * 3 + 2 - c] << 2) & 0xFF
        table[i * 4 + 3] = 0
    return bytes(table)


def palette_to_rgb(table: bytes | bytearray | memoryview) -> list[tuple[int, int, int]]:
    """BMPカラーテーブルをRGBタプルのリストとして読み出す"""
    return [(table[i * 4 + 2], table[i * 4 + 1], table[i * 4]) for i in range(len(table) // 4)]
