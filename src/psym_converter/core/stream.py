# psym_converter/core/stream.py
"""
サンプルとストリームのデータ構造

このモジュールは、1tick分の書き込み列（Sample）と、
それを順序付きで保持するStreamを定義します。シリアライザの共通入力です。
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from psym_converter.common.types import AY_NUM_REGISTERS, RegisterWrite

MAX_CLOCK_HZ = 0xFFFFFFFF
MAX_SAMPLE_RATE_HZ = 0xFF

# @intent:responsibility 1tickで発行するレジスタ書き込みを不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Sample:
    """
    1tick分のレジスタ書き込み（レジスタ番号の昇順）。空のSampleは存在しません。
    """
    writes: Tuple[RegisterWrite, ...]

    def __post_init__(self):
        writes = tuple(RegisterWrite(int(reg), int(val)) for reg, val in self.writes)
        if not writes:
            raise ValueError("Sample must contain at least one register write.")
        if len(writes) > AY_NUM_REGISTERS:
            raise ValueError(f"Sample has {len(writes)} writes, at most {AY_NUM_REGISTERS} allowed.")
        for reg, val in writes:
            if not 0 <= reg < AY_NUM_REGISTERS:
                raise ValueError(f"Register {reg} out of range.")
            if not 0 <= val <= 0xFF:
                raise ValueError(f"Value {val} is not an 8-bit value.")
        # frozenなのでobject.__setattr__で正規化したタプルを格納する
        object.__setattr__(self, "writes", writes)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[int, int]]) -> "Sample":
        return cls(tuple(pairs))

    def __len__(self) -> int:
        return len(self.writes)

    def __iter__(self):
        return iter(self.writes)

# @intent:responsibility サンプル列とストリームのメタデータを保持します。
# @intent:rationale sample_countは常にsamplesの長さから導出し、外部の値を信用しません。
@dataclass
class Stream:
    """
    シリアライズ対象のサンプル列と、クロック周波数・サンプルレート。
    """
    clock_hz: int
    sample_rate_hz: int
    samples: List[Sample] = field(default_factory=list)

    def __post_init__(self):
        if not 0 <= self.clock_hz <= MAX_CLOCK_HZ:
            raise ValueError(f"Clock frequency {self.clock_hz} does not fit in 32 bits.")
        if not 0 <= self.sample_rate_hz <= MAX_SAMPLE_RATE_HZ:
            raise ValueError(f"Sample rate {self.sample_rate_hz} does not fit in 8 bits.")

    @property
    def sample_count(self) -> int:
        return len(self.samples)

    def append(self, sample: Sample) -> None:
        self.samples.append(sample)


# @intent:responsibility 再生デバイスの動作を模倣し、各サンプル適用後のレジスタ配列を返します。
def replay(stream: Stream, register_count: int = AY_NUM_REGISTERS) -> List[List[Optional[int]]]:
    """
    全レジスタ未設定の配列にストリームのサンプルを順に適用し、
    サンプルごとの適用後の状態（コピー）をリストで返します。
    """
    registers: List[Optional[int]] = [None] * register_count
    states = []
    for sample in stream.samples:
        for reg, val in sample:
            registers[reg] = val
        states.append(list(registers))
    return states
