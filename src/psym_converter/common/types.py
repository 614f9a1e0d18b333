"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される型エイリアスと定数を定義します。
"""
from typing import List, NamedTuple, Optional

# @intent:data_structure AY-3-8910/YM2149のレジスタ数。
AY_NUM_REGISTERS = 16

DEFAULT_CLOCK_HZ = 2000000
DEFAULT_SAMPLE_RATE_HZ = 50

# @intent:data_structure 1tick分のレジスタ状態。未設定のスロットはNone。
# Source, Tracker, Collectorなど複数のレイヤーで共通して使用されます。
RegisterSnapshot = List[Optional[int]]

# @intent:data_structure チップへの単一のレジスタ書き込み。
class RegisterWrite(NamedTuple):
    reg: int
    val: int
