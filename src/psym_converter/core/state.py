# psym_converter/core/state.py
"""
Core Layer (チップ状態)

このモジュールは、再生デバイスが最後に書き込まれたレジスタ値を記憶している
状態をモデル化したデータ構造を定義します。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from psym_converter.common.types import AY_NUM_REGISTERS

# @intent:responsibility 各レジスタに最後に書き込まれた値を保持します。
# @intent:rationale 変換1回につき1インスタンスを生成し、Trackerへ明示的に渡します。
@dataclass
class ChipState:
    """
    レジスタ番号ごとの「最後に書き込まれた値」を保持するデータクラス。
    一度も書き込まれていないレジスタはNoneです。
    """
    register_count: int = AY_NUM_REGISTERS
    values: List[Optional[int]] = field(default=None)

    def __post_init__(self):
        if not isinstance(self.register_count, int) or self.register_count <= 0:
            raise ValueError("Register count must be a positive integer.")
        if self.values is None:
            self.values = [None] * self.register_count
        elif len(self.values) != self.register_count:
            raise ValueError(
                f"Chip state has {len(self.values)} registers, expected {self.register_count}."
            )

    # @intent:responsibility 指定されたレジスタの最終書き込み値を返します。
    # @intent:pre-condition regは0以上register_count未満である必要があります。
    def get(self, reg: int) -> Optional[int]:
        if not 0 <= reg < self.register_count:
            raise IndexError(f"Register {reg} out of range for chip with {self.register_count} registers.")
        return self.values[reg]

    # @intent:responsibility 書き込みを記録します。
    # @intent:pre-condition valは8bit値である必要があります。
    def set(self, reg: int, val: int) -> None:
        if not 0 <= reg < self.register_count:
            raise IndexError(f"Register {reg} out of range for chip with {self.register_count} registers.")
        if not 0 <= val <= 0xFF:
            raise ValueError(f"Value {val} is not an 8-bit value.")
        self.values[reg] = val

    def is_written(self, reg: int) -> bool:
        return self.get(reg) is not None

    # @intent:responsibility 全レジスタを未書き込み状態に戻します。
    def reset(self) -> None:
        self.values = [None] * self.register_count
