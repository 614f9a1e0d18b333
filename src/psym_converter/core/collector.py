# psym_converter/core/collector.py
"""
Core Layer (サンプルコレクタ)

スナップショットソースを最後まで読み出し、tickごとに差分トラッカーを呼び出して
空でない書き込み列をSampleとしてStreamに蓄積する責務を負います。
"""
from typing import Optional

from psym_converter.common.types import DEFAULT_CLOCK_HZ, DEFAULT_SAMPLE_RATE_HZ
from psym_converter.core.state import ChipState
from psym_converter.core.stream import Sample, Stream
from psym_converter.core.tracker import DeltaTracker
from psym_converter.source.source import SnapshotSource

# @intent:responsibility ソースの全tickを処理し、Streamを構築します。
class SampleCollector:
    """
    SnapshotSourceを駆動してStreamを生成するクラス。
    書き込みが発生しなかったtickは出力に現れません（空のプレースホルダも作りません）。
    """
    def __init__(self, tracker: Optional[DeltaTracker] = None, verbose: bool = False):
        self._tracker = tracker if tracker is not None else DeltaTracker()
        self._verbose = verbose

    # @intent:responsibility ソースを枯渇するまで読み出し、Streamを返します。
    # @intent:rationale チップ状態は呼び出しごとに新規作成し、変換間で共有しません。
    def collect(self, source: SnapshotSource,
                clock_hz: int = DEFAULT_CLOCK_HZ,
                sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ) -> Stream:
        stream = Stream(clock_hz=clock_hz, sample_rate_hz=sample_rate_hz)
        chip_state = ChipState()

        while source.has_next():
            snapshot = source.next()
            writes = self._tracker.compute_writes(snapshot, chip_state)
            if not writes:
                continue

            if self._verbose:
                print(f"Sample {stream.sample_count}")
                for reg, val in writes:
                    print(f"\t{reg},{val}")
            stream.append(Sample(tuple(writes)))

        return stream
