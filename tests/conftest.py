"""PMTテスト用フィクスチャ

テスト用のPMTデータを組み立てるヘルパーを提供する。
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from pmtconv.codec.constants import (
    FOOTER_RESERVED_BYTES,
    GROUP_BYTES,
    PLANE_ROW_BYTES,
    PLANES,
    ROWS_PER_GROUP,
)

# エンドツーエンドテストで各グループに割り当てるピクセル値
GROUP_PIXEL_VALUES = (1, 3, 6, 9, 12, 15)


def _run_group(value: int) -> bytes:
    """グループ全体を1つの値で埋めるランオペコード列"""
    full_runs, remainder = divmod(GROUP_BYTES, 127)
    data = bytes((0xFF, value)) * full_runs
    if remainder:
        data += bytes((0x80 | remainder, value))
    return data


def _uniform_pixel_group(pixel: int) -> bytes:
    """全ピクセルが同じ4ビット値になるグループのRLEデータ

    プレーンpの105バイトを、pixelのビットpが立っていれば0xFF、そうでなければ0x00で埋める。
    """
    row = b"".join(
        bytes((0x80 | PLANE_ROW_BYTES, 0xFF if pixel & (1 << plane) else 0x00))
        for plane in range(PLANES)
    )
    return row * ROWS_PER_GROUP


def _pmt_bytes(groups: list[bytes], color_table: bytes, reserved: bytes | None = None) -> bytes:
    """グループとカラーテーブルからPMTファイルのバイト列を組み立てる"""
    if reserved is None:
        reserved = b"\x00" * FOOTER_RESERVED_BYTES
    body = b"".join(len(group).to_bytes(2, "little") + group for group in groups)
    return body + reserved + color_table


@pytest.fixture
def run_group() -> Callable[[int], bytes]:
    """1つの値で埋めるグループを生成する関数"""
    return _run_group


@pytest.fixture
def uniform_pixel_group() -> Callable[[int], bytes]:
    """全ピクセルが同じ値になるグループを生成する関数"""
    return _uniform_pixel_group


@pytest.fixture
def make_pmt() -> Callable[..., bytes]:
    """PMTファイルのバイト列を組み立てる関数"""
    return _pmt_bytes


@pytest.fixture(scope="session")
def sample_color_table() -> bytes:
    """テスト用カラーテーブル（R,G,B 6ビット x 16）

    エントリiは (i * 4, 63 - i * 4, i % 4 * 16 + 1) で、グレーのエントリを含まない。
    """
    return b"".join(bytes((i * 4, 63 - i * 4, (i % 4) * 16 + 1)) for i in range(16))


@pytest.fixture(scope="session")
def group_pixel_values() -> tuple[int, ...]:
    """sample_pmtの各グループに割り当てたピクセル値"""
    return GROUP_PIXEL_VALUES


@pytest.fixture(scope="session")
def sample_pmt(sample_color_table: bytes) -> bytes:
    """各グループが異なる単一ピクセル値を持つPMTデータ"""
    groups = [_uniform_pixel_group(value) for value in GROUP_PIXEL_VALUES]
    return _pmt_bytes(groups, sample_color_table)


@pytest.fixture
def sample_pmt_file(tmp_path: Path, sample_pmt: bytes) -> Path:
    """sample_pmtを書き込んだPMTファイル"""
    path = tmp_path / "scan.pmt"
    path.write_bytes(sample_pmt)
    return path
