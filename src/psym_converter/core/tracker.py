# psym_converter/core/tracker.py
"""
Core Layer (差分トラッカー)

このモジュールは、1tick分のレジスタスナップショットとチップ状態を比較し、
そのtickで発行すべき最小限のレジスタ書き込みを決定する責務を負います。
"""
from typing import List

from psym_converter.common.types import RegisterSnapshot, RegisterWrite
from psym_converter.core.state import ChipState

# @intent:responsibility スナップショットから最小の書き込み列を計算します。
class DeltaTracker:
    """
    スナップショットとチップ状態の差分から、レジスタ書き込みのリストを生成するクラス。

    skip_duplicatesがTrueの場合、変化したレジスタのみを書き込みます。
    ただし、設定済みのレジスタがあるのに変化が一つもないtickでは、
    最も番号の小さい設定済みレジスタを値が同じでも1つだけ書き込みます（ハートビート）。
    Falseの場合、設定済みの全レジスタを毎tick書き込みます。
    """
    def __init__(self, skip_duplicates: bool = True):
        self.skip_duplicates = skip_duplicates

    # @intent:responsibility 1tick分の書き込みを決定し、発行した書き込みをchip_stateに反映します。
    # @intent:pre-condition snapshotの長さはchip_state.register_countと一致する必要があります。
    # @intent:post-condition 戻り値のレジスタ番号は昇順です。chip_stateは発行したレジスタのみ更新されます。
    def compute_writes(self, snapshot: RegisterSnapshot, chip_state: ChipState) -> List[RegisterWrite]:
        if len(snapshot) != chip_state.register_count:
            raise ValueError(
                f"Snapshot has {len(snapshot)} registers, expected {chip_state.register_count}."
            )

        # 不正な値があればchip_stateを変更する前に拒否する
        num_new = 0
        for reg, val in enumerate(snapshot):
            if val is None:
                continue
            if not 0 <= val <= 0xFF:
                raise ValueError(f"Value {val} for register {reg} is not an 8-bit value.")
            if val != chip_state.get(reg):
                num_new += 1

        writes: List[RegisterWrite] = []
        for reg, val in enumerate(snapshot):
            if val is None:
                continue

            if not self.skip_duplicates:
                emit = True
            elif not num_new and not writes:
                # heartbeat: 変化なしのtickでも最初の設定済みレジスタを1つ書く
                emit = True
            else:
                emit = val != chip_state.get(reg)

            if emit:
                chip_state.set(reg, val)
                writes.append(RegisterWrite(reg, val))

        return writes


_default_tracker = DeltaTracker()

def compute_writes(snapshot: RegisterSnapshot, chip_state: ChipState) -> List[RegisterWrite]:
    """
    デフォルト設定（重複スキップ有効）のトラッカーで書き込みを計算します。
    """
    return _default_tracker.compute_writes(snapshot, chip_state)
