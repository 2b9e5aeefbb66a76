"""グループ読み取りモジュール

長さプレフィックス付きの生グループをストリームから読み取る。
"""

from typing import BinaryIO

from pmtconv.codec.constants import GROUP_BYTES, GROUP_LENGTH_PREFIX_BYTES
from pmtconv.codec.errors import BufferTooSmallError, TruncatedInputError


def read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    """ストリームからちょうどsizeバイトを読み取る

    Args:
        stream: 入力ストリーム
        size: 読み取るバイト数
        what: エラーメッセージに含める読み取り対象の説明

    Returns:
        読み取ったバイト列

    Raises:
        TruncatedInputError: sizeバイト読む前にストリームが終端に達した場合
    """
    data = stream.read(size)
    if len(data) != size:
        raise TruncatedInputError(f"{what}の読み取りに失敗しました: {size}バイト中{len(data)}バイト")
    return data


class GroupReader:
    """生グループ読み取りクラス

    2バイトのリトルエンディアン長の後に続くRLEグループデータを読み取る。
    """

    def read_length(self, stream: BinaryIO) -> int:
        """グループ長プレフィックスを読み取る

        Raises:
            TruncatedInputError: プレフィックスが2バイトに満たない場合
        """
        prefix = read_exact(stream, GROUP_LENGTH_PREFIX_BYTES, "グループ長")
        return int.from_bytes(prefix, "little")

    def read_into(self, stream: BinaryIO, buffer: bytearray | memoryview) -> int:
        """グループを読み取り、呼び出し元のバッファに格納する

        Args:
            stream: グループ境界に位置する入力ストリーム
            buffer: 格納先バッファ（容量はlen(buffer)）

        Returns:
            バッファに格納したバイト数（グループ長と等しい）

        Raises:
            TruncatedInputError: プレフィックスまたはデータが不足している場合
            BufferTooSmallError: グループ長がバッファ容量を超える場合
        """
        length = self.read_length(stream)
        capacity = len(buffer)
        if length > capacity:
            raise BufferTooSmallError(
                f"グループデータ（{length}バイト）がバッファ（{capacity}バイト）に収まりません"
            )

        buffer[:length] = read_exact(stream, length, f"グループデータ（{length}バイト）")
        return length

    def read(self, stream: BinaryIO, capacity: int = GROUP_BYTES) -> bytes:
        """グループを読み取り、新しいバイト列として返す"""
        buffer = bytearray(capacity)
        length = self.read_into(stream, buffer)
        return bytes(buffer[:length])

    def skip(self, stream: BinaryIO, capacity: int = GROUP_BYTES) -> int:
        """グループを読み飛ばし、そのデータ長を返す"""
        length = self.read_length(stream)
        if length > capacity:
            raise BufferTooSmallError(
                f"グループデータ（{length}バイト）がバッファ（{capacity}バイト）に収まりません"
            )
        read_exact(stream, length, f"グループデータ（{length}バイト）")
        return length
