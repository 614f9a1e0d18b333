# tests/core/test_stream.py
"""
psym_converter.core.streamモジュールの単体テスト。
"""
import pytest

from psym_converter.common.types import RegisterWrite
from psym_converter.core.stream import Sample, Stream, replay


class TestSample:
    """
    Sampleデータクラスの単体テスト。
    """
    # @intent:test_case_init ペアのリストからSampleが生成され、RegisterWriteに正規化されることを検証します。
    def test_from_pairs(self):
        sample = Sample.from_pairs([(0, 0), (7, 255)])
        assert sample.writes == (RegisterWrite(0, 0), RegisterWrite(7, 255))
        assert len(sample) == 2
        assert list(sample) == [(0, 0), (7, 255)]

    # @intent:test_case_empty 空のSampleは生成できないことを検証します。
    def test_empty_sample_rejected(self):
        with pytest.raises(ValueError, match="Sample must contain at least one register write."):
            Sample(())

    # @intent:test_case_invalid 範囲外のレジスタや値を拒否することを検証します。
    def test_invalid_pairs_rejected(self):
        with pytest.raises(ValueError, match="Register 16 out of range."):
            Sample.from_pairs([(16, 0)])
        with pytest.raises(ValueError, match="Value 300 is not an 8-bit value."):
            Sample.from_pairs([(0, 300)])
        with pytest.raises(ValueError, match="at most 16 allowed"):
            Sample.from_pairs([(0, 0)] * 17)

    # @intent:test_case_immutability Sampleが不変であることを検証します。
    def test_immutability(self):
        sample = Sample.from_pairs([(1, 2)])
        with pytest.raises(AttributeError):
            sample.writes = ()


class TestStream:
    """
    Streamデータクラスの単体テスト。
    """
    # @intent:test_case_count sample_countが常にサンプル数と一致することを検証します。
    def test_sample_count_derived(self):
        stream = Stream(clock_hz=2000000, sample_rate_hz=50)
        assert stream.sample_count == 0
        stream.append(Sample.from_pairs([(0, 1)]))
        stream.append(Sample.from_pairs([(1, 1)]))
        assert stream.sample_count == 2

    # @intent:test_case_boundary ヘッダのフィールド幅を超える値でValueErrorが発生することを検証します。
    def test_field_ranges(self):
        with pytest.raises(ValueError, match="Sample rate 256 does not fit in 8 bits."):
            Stream(clock_hz=2000000, sample_rate_hz=256)
        with pytest.raises(ValueError, match="does not fit in 32 bits"):
            Stream(clock_hz=1 << 32, sample_rate_hz=50)


class TestReplay:
    """
    replay関数の単体テスト。
    """
    # @intent:test_case_replay サンプルを順に適用したレジスタ状態が得られることを検証します。
    def test_replay_applies_samples_in_order(self):
        stream = Stream(clock_hz=1, sample_rate_hz=1, samples=[
            Sample.from_pairs([(0, 0), (7, 255)]),
            Sample.from_pairs([(0, 0)]),
            Sample.from_pairs([(4, 255), (7, 251)]),
        ])
        states = replay(stream)
        assert len(states) == 3
        assert states[0][0] == 0 and states[0][7] == 255 and states[0][4] is None
        assert states[2][4] == 255 and states[2][7] == 251 and states[2][0] == 0

    def test_replay_empty(self):
        assert replay(Stream(clock_hz=1, sample_rate_hz=1)) == []
