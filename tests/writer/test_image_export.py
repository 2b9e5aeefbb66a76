"""Pillow画像変換のテスト"""

from pathlib import Path

import pytest
from PIL import Image

from pmtconv.codec.constants import ROW_BYTES, ROWS
from pmtconv.codec.decoder import PMTImage
from pmtconv.codec.errors import OutputWriteError
from pmtconv.codec.palette import convert_color_table
from pmtconv.writer.image import save_image, to_pil_image


@pytest.fixture
def checker_image() -> PMTImage:
    """偶数ピクセルが2、奇数ピクセルが13の画像"""
    raw_table = b"".join(bytes((i * 4, 0x20, 63 - i * 4)) for i in range(16))
    return PMTImage(pixels=b"\x2d" * (ROW_BYTES * ROWS), color_table=convert_color_table(raw_table))


class TestToPilImage:
    """to_pil_image関数のテスト"""

    def test_mode_and_size(self, checker_image: PMTImage) -> None:
        """パレットモードで840x888の画像になることを確認"""
        image = to_pil_image(checker_image)
        assert image.mode == "P"
        assert image.size == (840, 888)

    def test_nibble_order(self, checker_image: PMTImage) -> None:
        """上位ニブルが左のピクセルになることを確認"""
        image = to_pil_image(checker_image)
        assert image.getpixel((0, 0)) == 2
        assert image.getpixel((1, 0)) == 13
        assert image.getpixel((838, 887)) == 2

    def test_palette(self, checker_image: PMTImage) -> None:
        """パレットがRGB順で設定されることを確認"""
        image = to_pil_image(checker_image).convert("RGB")
        assert image.getpixel((0, 0)) == (8 << 2, 0x20 << 2, (63 - 8) << 2)


class TestSaveImage:
    """save_image関数のテスト"""

    def test_save_png(self, tmp_path: Path, checker_image: PMTImage) -> None:
        """PNGとして保存し、読み戻せることを確認"""
        path = tmp_path / "out.png"

        size = save_image(checker_image, path)

        assert size == path.stat().st_size
        with Image.open(path) as image:
            assert image.format == "PNG"
            assert image.size == (840, 888)
            assert image.getpixel((1, 5)) == 13

    def test_unwritable_path(self, tmp_path: Path, checker_image: PMTImage) -> None:
        """書き込めないパスはOutputWriteError"""
        blocker = tmp_path / "file"
        blocker.write_bytes(b"")
        with pytest.raises(OutputWriteError):
            save_image(checker_image, blocker / "out.png")
