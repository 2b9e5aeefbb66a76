"""PMT形式の固定寸法定数

PMTファイルは6つのRLEグループで構成され、各グループは148行分の
ピクセルデータ（62160バイト）に展開される。各行は4つのVGAプレーン
（各105バイト、1ビット/ピクセル）から成る。
"""

PLANE_ROW_BYTES: int = 105
"""1プレーン1行分のバイト数（1ビット/ピクセル）"""

PIXELS_PER_ROW: int = PLANE_ROW_BYTES * 8
"""1行のピクセル数"""

PLANES: int = 4
"""VGAプレーン数（= 1ピクセルあたりのビット数）"""

ROW_BYTES: int = PLANE_ROW_BYTES * PLANES
"""全プレーンを含む1行分のバイト数（BMPの4ビット行サイズと同じ）"""

ROWS_PER_GROUP: int = 148
"""1グループあたりの行数"""

GROUP_BYTES: int = ROW_BYTES * ROWS_PER_GROUP
"""展開後の1グループのバイト数"""

GROUPS: int = 6
"""グループ数"""

ROWS: int = ROWS_PER_GROUP * GROUPS
"""画像全体の行数"""

PIXEL_ARRAY_BYTES: int = GROUP_BYTES * GROUPS
"""出力ピクセル配列のバイト数（2ピクセル/バイト）"""

GROUP_LENGTH_PREFIX_BYTES: int = 2
"""グループ長プレフィックスのバイト数（リトルエンディアン）"""

FOOTER_RESERVED_BYTES: int = 16
"""フッター先頭の未使用領域のバイト数"""

PALETTE_ENTRIES: int = 1 << PLANES
"""カラーテーブルのエントリ数"""

PMT_COLOR_TABLE_BYTES: int = PALETTE_ENTRIES * 3
"""PMTカラーテーブルのバイト数（R,G,B 各6ビット）"""

BMP_COLOR_TABLE_BYTES: int = PALETTE_ENTRIES * 4
"""BMPカラーテーブルのバイト数（B,G,R,0）"""

FOOTER_BYTES: int = FOOTER_RESERVED_BYTES + PMT_COLOR_TABLE_BYTES
"""フッター全体のバイト数"""
