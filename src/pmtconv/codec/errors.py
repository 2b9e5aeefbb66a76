"""PMT変換エラー定義

変換処理で発生するエラーの階層。いずれも現在のファイルについては
回復不能で、変換全体を中断する。
"""


class PMTError(ValueError):
    """PMT変換エラーの基底クラス"""

    pass


class TruncatedInputError(PMTError):
    """期待したバイト数を読む前に入力ストリームが終端に達した"""

    pass


class BufferTooSmallError(PMTError):
    """宣言されたグループ長がバッファ容量を超えている"""

    pass


class InputOverrunError(PMTError):
    """RLEオペコードが生グループの範囲外のバイトを参照した"""

    pass


class OutputOverrunError(PMTError):
    """RLE展開が出力バッファの容量を超えて書き込もうとした"""

    pass


class SizeMismatchError(PMTError):
    """展開後のバイト数が期待サイズと一致しない"""

    pass


class OutputWriteError(PMTError):
    """出力ファイルを作成または書き込みできなかった"""

    pass
