"""RLEDecoderのテスト

PMT形式のRLEフォーマット:
- 制御バイトの最上位ビット1 = ラン（下位7ビットが長さ、次の1バイトが値）
- 制御バイトの最上位ビット0 = リテラル（値がコピーするバイト数）
"""

import pytest

from pmtconv.codec.constants import GROUP_BYTES
from pmtconv.codec.errors import InputOverrunError, OutputOverrunError, SizeMismatchError
from pmtconv.codec.rle import RLEDecoder


class TestRLEDecoderConstants:
    """RLEDecoderの定数テスト"""

    def test_run_flag(self) -> None:
        """ランを示すビットが最上位ビットであることを確認"""
        assert RLEDecoder.RUN_FLAG == 0x80

    def test_count_mask(self) -> None:
        """ラン長のマスクが下位7ビットであることを確認"""
        assert RLEDecoder.COUNT_MASK == 0x7F


class TestRLEDecoderDecode:
    """RLEDecoder.decodeメソッドのテスト"""

    @pytest.fixture
    def decoder(self) -> RLEDecoder:
        """RLEDecoderインスタンスを作成するフィクスチャ"""
        return RLEDecoder()

    def test_decode_empty_data(self, decoder: RLEDecoder) -> None:
        """空データの展開は空バイト列を返すことを確認"""
        assert decoder.decode(b"", 0) == b""

    @pytest.mark.parametrize(
        "data, output_size, expected",
        [
            pytest.param(b"\x85\x41", 5, b"AAAAA", id="正常系: ラン5バイト"),
            pytest.param(b"\xff\x00", 127, b"\x00" * 127, id="正常系: 最大ラン長127"),
            pytest.param(b"\x80\x41", 0, b"", id="正常系: ラン長0"),
            pytest.param(b"\x82\x01\x83\x02", 5, b"\x01\x01\x02\x02\x02", id="正常系: 連続するラン"),
        ],
    )
    def test_decode_runs(
        self, decoder: RLEDecoder, data: bytes, output_size: int, expected: bytes
    ) -> None:
        """ランオペコードが値をn回書き込むことを確認"""
        assert decoder.decode(data, output_size) == expected

    @pytest.mark.parametrize(
        "data, output_size, expected",
        [
            pytest.param(b"\x03ABC", 3, b"ABC", id="正常系: リテラル3バイト"),
            pytest.param(b"\x00", 0, b"", id="正常系: リテラル0バイト"),
            pytest.param(
                b"\x7f" + bytes(range(127)), 127, bytes(range(127)), id="正常系: 最大リテラル127"
            ),
            pytest.param(b"\x02\x80\xff", 2, b"\x80\xff", id="正常系: 最上位ビットが立ったリテラル値"),
        ],
    )
    def test_decode_literals(
        self, decoder: RLEDecoder, data: bytes, output_size: int, expected: bytes
    ) -> None:
        """リテラルオペコードが後続バイトをそのままコピーすることを確認"""
        assert decoder.decode(data, output_size) == expected

    def test_decode_mixed_runs_and_literals(self, decoder: RLEDecoder) -> None:
        """ランとリテラルの混合パターンが正しく展開されることを確認"""
        data = b"\x02AB" + b"\x83C" + b"\x01D"
        assert decoder.decode(data, 6) == b"ABCCCD"

    def test_decode_full_group(self, decoder: RLEDecoder, run_group) -> None:
        """1グループ分のランがちょうどGROUP_BYTESに展開されることを確認"""
        result = decoder.decode(run_group(0x5A), GROUP_BYTES)
        assert len(result) == GROUP_BYTES
        assert result == b"\x5a" * GROUP_BYTES


class TestRLEDecoderDecodeInto:
    """RLEDecoder.decode_intoメソッドのテスト"""

    def test_returns_written_size(self) -> None:
        """書き込んだバイト数を返すことを確認"""
        output = bytearray(4)
        assert RLEDecoder().decode_into(b"\x01X\x83Y", output) == 4
        assert output == bytearray(b"XYYY")

    def test_expected_size_smaller_than_capacity(self) -> None:
        """期待サイズを容量より小さく指定できることを確認"""
        output = bytearray(8)
        assert RLEDecoder().decode_into(b"\x82Z", output, expected_size=2) == 2
        assert output[:2] == bytearray(b"ZZ")

    def test_reused_buffer_is_overwritten(self) -> None:
        """同じバッファを再利用しても前回の内容が残らないことを確認"""
        decoder = RLEDecoder()
        output = bytearray(3)
        decoder.decode_into(b"\x83A", output)
        decoder.decode_into(b"\x03XYZ", output)
        assert output == bytearray(b"XYZ")


class TestRLEDecoderErrors:
    """RLEDecoderのエラー検出テスト"""

    @pytest.fixture
    def decoder(self) -> RLEDecoder:
        """RLEDecoderインスタンスを作成するフィクスチャ"""
        return RLEDecoder()

    def test_short_run_is_size_mismatch(self, decoder: RLEDecoder) -> None:
        """ラン1つだけでグループサイズに満たない場合はSizeMismatchError"""
        with pytest.raises(SizeMismatchError):
            decoder.decode(b"\x8a\x07", GROUP_BYTES)

    def test_short_output_is_size_mismatch(self, decoder: RLEDecoder) -> None:
        """入力を消費しても期待サイズに達しない場合はSizeMismatchError"""
        with pytest.raises(SizeMismatchError, match="3"):
            decoder.decode(b"\x03ABC", 4)

    def test_run_past_output_is_overrun(self, decoder: RLEDecoder, run_group) -> None:
        """出力済みバイト数とラン長の合計が容量を超える場合はOutputOverrunError"""
        with pytest.raises(OutputOverrunError):
            decoder.decode(run_group(0x00) + b"\x81\x00", GROUP_BYTES)

    def test_literal_past_output_is_overrun(self, decoder: RLEDecoder) -> None:
        """リテラルが容量を超える場合はOutputOverrunError"""
        with pytest.raises(OutputOverrunError):
            decoder.decode(b"\x03ABC", 2)

    def test_overrun_does_not_write_past_capacity(self, decoder: RLEDecoder) -> None:
        """容量を超える書き込みが切り詰めて行われないことを確認"""
        output = bytearray(b"....")
        with pytest.raises(OutputOverrunError):
            decoder.decode_into(b"\x82A\x83B", output)
        assert output == bytearray(b"AA..")

    @pytest.mark.parametrize(
        "data",
        [
            pytest.param(b"\x85", id="異常系: ラン値がない"),
            pytest.param(b"\x01A\x80", id="異常系: 末尾のラン値がない"),
            pytest.param(b"\x05ABC", id="異常系: リテラル不足"),
            pytest.param(b"\x01", id="異常系: リテラル1バイト不足"),
        ],
    )
    def test_input_overrun(self, decoder: RLEDecoder, data: bytes) -> None:
        """オペコードが入力範囲外を参照する場合はInputOverrunError"""
        with pytest.raises(InputOverrunError):
            decoder.decode(data, 16)
