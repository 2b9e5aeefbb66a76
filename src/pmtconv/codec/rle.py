"""RLE展開モジュール

PMT形式のグループで使用されるランレングス圧縮データの展開機能を提供する。

制御バイトの最上位ビットで2種類のオペコードを区別する:
- 最上位ビット1: ラン。下位7ビットが長さn、次の1バイトを値としてn回書き込む
- 最上位ビット0: リテラル。バイト値nが後続のコピーバイト数
"""

from pmtconv.codec.errors import InputOverrunError, OutputOverrunError, SizeMismatchError


class RLEDecoder:
    """RLE展開クラス

    1グループ分の生データを固定サイズの出力に展開する。
    入力をすべて消費した時点の出力バイト数が期待サイズと一致しない場合は
    エラーとする。
    """

    RUN_FLAG: int = 0x80
    """ランオペコードを示すビット"""

    COUNT_MASK: int = 0x7F
    """ラン長を取り出すマスク"""

    def decode_into(
        self,
        data: bytes | bytearray | memoryview,
        output: bytearray | memoryview,
        expected_size: int | None = None,
    ) -> int:
        """RLE圧縮データを呼び出し元のバッファに展開する

        Args:
            data: RLE圧縮されたバイト列（全体が1グループ分）
            output: 展開先バッファ
            expected_size: 期待する展開サイズ（省略時はlen(output)）

        Returns:
            書き込んだバイト数（expected_sizeと等しい）

        Raises:
            InputOverrunError: オペコードが入力範囲外のバイトを参照した場合
            OutputOverrunError: 書き込みが出力バッファの容量を超える場合
            SizeMismatchError: 展開後のバイト数が期待サイズと異なる場合
        """
        capacity = len(output)
        if expected_size is None:
            expected_size = capacity

        input_pos = 0
        output_pos = 0
        data_len = len(data)

        while input_pos < data_len:
            control = data[input_pos]
            input_pos += 1

            if control & self.RUN_FLAG:
                count = control & self.COUNT_MASK
                if input_pos >= data_len:
                    raise InputOverrunError(
                        f"ラン値が入力データの終端を超えています（オフセット{input_pos}）"
                    )
                if output_pos + count > capacity:
                    raise OutputOverrunError(
                        f"出力バッファの終端を超えて書き込もうとしました"
                        f"（オフセット{output_pos} + {count} > {capacity}）"
                    )
                value = data[input_pos]
                input_pos += 1
                output[output_pos : output_pos + count] = bytes((value,)) * count
            else:
                count = control
                if input_pos + count > data_len:
                    raise InputOverrunError(
                        f"リテラルが入力データの終端を超えています"
                        f"（オフセット{input_pos} + {count} > {data_len}）"
                    )
                if output_pos + count > capacity:
                    raise OutputOverrunError(
                        f"出力バッファの終端を超えて書き込もうとしました"
                        f"（オフセット{output_pos} + {count} > {capacity}）"
                    )
                output[output_pos : output_pos + count] = data[input_pos : input_pos + count]
                input_pos += count

            output_pos += count

        if output_pos != expected_size:
            raise SizeMismatchError(f"{output_pos}バイトを展開しましたが、{expected_size}バイトが必要です")

        return output_pos

    def decode(self, data: bytes, output_size: int) -> bytes:
        """RLE圧縮データを展開する

        Args:
            data: RLE圧縮されたバイト列
            output_size: 展開後の期待サイズ（バイト）

        Returns:
            展開されたバイト列

        Raises:
            InputOverrunError: オペコードが入力範囲外のバイトを参照した場合
            OutputOverrunError: 展開結果がoutput_sizeを超える場合
            SizeMismatchError: 展開結果がoutput_sizeに満たない場合
        """
        output = bytearray(output_size)
        self.decode_into(data, output)
        return bytes(output)
