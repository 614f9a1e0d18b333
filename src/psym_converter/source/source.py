# psym_converter/source/source.py
"""
Source Layer (スナップショット供給)

このモジュールは、tickごとのレジスタスナップショットを供給する
スナップショットソースのインターフェースを定義します。
"""
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Iterable, List, Optional, Union

from psym_converter.common.types import AY_NUM_REGISTERS, RegisterSnapshot

# @intent:responsibility スナップショットソースの抽象インターフェースを定義します。
class SnapshotSource(ABC):
    """
    tickごとのレジスタスナップショットを順に供給する抽象基底クラス。
    各スナップショットは一度だけ、順番通りに読み出されます。
    """
    # @intent:responsibility 次のスナップショットが存在するかを返します。
    @abstractmethod
    def has_next(self) -> bool:
        pass

    # @intent:responsibility 次のtickのスナップショットを返します。
    # @intent:pre-condition has_next()がTrueである必要があります。
    @abstractmethod
    def next(self) -> RegisterSnapshot:
        """
        長さがレジスタ数と等しいリストを返します。未設定のレジスタはNoneです。
        """
        pass

    def __iter__(self):
        while self.has_next():
            yield self.next()

# @intent:responsibility メモリ上のスナップショット列を供給します。
class ListSnapshotSource(SnapshotSource):
    """
    テストおよびライブラリ利用のための、メモリ上のスナップショットソース。
    スナップショットはリスト形式、または{レジスタ番号: 値}の辞書形式で指定できます。
    """
    def __init__(self, snapshots: Iterable[Union[RegisterSnapshot, Mapping[int, int]]],
                 register_count: int = AY_NUM_REGISTERS):
        self._register_count = register_count
        self._snapshots: List[RegisterSnapshot] = [self._normalize(s) for s in snapshots]
        self._position = 0

    # @intent:responsibility スナップショットを検証し、固定長のリストに変換します。
    def _normalize(self, snapshot) -> RegisterSnapshot:
        if isinstance(snapshot, Mapping):
            values: List[Optional[int]] = [None] * self._register_count
            for reg, val in snapshot.items():
                if not 0 <= reg < self._register_count:
                    raise IndexError(f"Register {reg} out of range for chip with {self._register_count} registers.")
                values[reg] = val
        else:
            values = list(snapshot)
            if len(values) != self._register_count:
                raise ValueError(
                    f"Snapshot has {len(values)} registers, expected {self._register_count}."
                )
        for val in values:
            if val is not None and not 0 <= val <= 0xFF:
                raise ValueError(f"Value {val} is not an 8-bit value.")
        return values

    def has_next(self) -> bool:
        return self._position < len(self._snapshots)

    def next(self) -> RegisterSnapshot:
        if not self.has_next():
            raise IndexError("Snapshot source is exhausted.")
        snapshot = self._snapshots[self._position]
        self._position += 1
        return list(snapshot)
