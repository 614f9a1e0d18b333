# tests/core/test_collector.py
"""
psym_converter.core.collectorモジュールの単体テスト。
ソースからStreamを構築する処理と、差分ストリームの再生による正しさを検証します。
"""
import random

import pytest

from psym_converter.core.collector import SampleCollector
from psym_converter.core.stream import replay
from psym_converter.core.tracker import DeltaTracker
from psym_converter.source.source import ListSnapshotSource

# @intent:test_suite サンプルコレクタの収集動作の検証。

class TestSampleCollector:
    """
    SampleCollectorの単体テスト。
    """
    # @intent:test_case_scenario 3tickのシナリオが期待通りのサンプル列になることを検証します。
    def test_collect_scenario(self):
        source = ListSnapshotSource([{0: 0, 7: 255}, {0: 0, 7: 255}, {4: 255, 7: 251}])
        stream = SampleCollector().collect(source, clock_hz=2000000, sample_rate_hz=50)

        assert stream.clock_hz == 2000000
        assert stream.sample_rate_hz == 50
        assert [list(s) for s in stream.samples] == [
            [(0, 0), (7, 255)],
            [(0, 0)],
            [(4, 255), (7, 251)],
        ]
        assert stream.sample_count == 3

    # @intent:test_case_drop_empty 書き込みのないtickが出力から除外されることを検証します。
    def test_empty_ticks_dropped(self):
        source = ListSnapshotSource([{}, {1: 5}, {}, {}, {2: 6}])
        stream = SampleCollector().collect(source)
        assert [list(s) for s in stream.samples] == [[(1, 5)], [(2, 6)]]

    # @intent:test_case_empty_source 空のソースからは空のStreamが得られることを検証します。
    def test_empty_source(self):
        stream = SampleCollector().collect(ListSnapshotSource([]))
        assert stream.sample_count == 0
        assert stream.samples == []

    # @intent:test_case_source_drained ソースが最後まで読み出されることを検証します。
    def test_source_exhausted(self):
        source = ListSnapshotSource([{0: 1}, {0: 2}])
        SampleCollector().collect(source)
        assert not source.has_next()

    # @intent:test_case_fresh_state collectの呼び出しごとにチップ状態が初期化されることを検証します。
    def test_chip_state_fresh_per_run(self):
        collector = SampleCollector()
        first = collector.collect(ListSnapshotSource([{3: 9}]))
        second = collector.collect(ListSnapshotSource([{3: 9}]))
        assert list(first.samples[0]) == list(second.samples[0]) == [(3, 9)]

    # @intent:test_case_keep_duplicates 重複スキップ無効のトラッカーが使われることを検証します。
    def test_collect_with_duplicates(self):
        source = ListSnapshotSource([{0: 1, 1: 2}, {0: 1, 1: 2}])
        stream = SampleCollector(DeltaTracker(skip_duplicates=False)).collect(source)
        assert [list(s) for s in stream.samples] == [[(0, 1), (1, 2)], [(0, 1), (1, 2)]]

    # @intent:test_case_verbose verboseモードでサンプルごとの書き込みが出力されることを検証します。
    def test_verbose_output(self, capsys):
        SampleCollector(verbose=True).collect(ListSnapshotSource([{0: 0, 7: 255}]))
        out = capsys.readouterr().out
        assert "Sample 0" in out
        assert "\t7,255" in out

    # @intent:test_case_replay 出力を再生すると、設定されたレジスタが各tickで正しい値になることを検証します。
    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_replay_reproduces_register_values(self, seed):
        rng = random.Random(seed)
        ticks = []
        for _ in range(200):
            snapshot = [None] * 16
            for reg in range(16):
                roll = rng.random()
                if roll < 0.4:
                    snapshot[reg] = rng.choice([0, 1, 255])
                elif roll < 0.5:
                    snapshot[reg] = rng.randrange(256)
            ticks.append(snapshot)

        stream = SampleCollector().collect(ListSnapshotSource(ticks))
        states = replay(stream)

        # 空のtickはサンプルを生成しないので、書き込みのあったtickと対応付ける
        non_empty = [t for t in ticks if any(v is not None for v in t)]
        assert len(states) == len(non_empty)
        for tick, state in zip(non_empty, states):
            for reg, val in enumerate(tick):
                if val is not None:
                    assert state[reg] == val
