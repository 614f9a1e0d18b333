# tests/source/test_source.py
"""
psym_converter.source.sourceモジュールの単体テスト。
"""
import pytest

from psym_converter.source.source import ListSnapshotSource, SnapshotSource


class TestListSnapshotSource:
    """
    ListSnapshotSourceの単体テスト。
    """
    # @intent:test_case_order スナップショットが順番通りに一度だけ返されることを検証します。
    def test_iterates_in_order(self):
        source = ListSnapshotSource([{0: 1}, {1: 2}])
        assert source.has_next()
        first = source.next()
        assert first[0] == 1 and first[1] is None
        second = source.next()
        assert second[1] == 2 and second[0] is None
        assert not source.has_next()

    # @intent:test_case_exhausted 枯渇後のnextでIndexErrorが発生することを検証します。
    def test_next_after_exhaustion(self):
        source = ListSnapshotSource([])
        assert not source.has_next()
        with pytest.raises(IndexError, match="Snapshot source is exhausted."):
            source.next()

    # @intent:test_case_list リスト形式のスナップショットがそのまま受け付けられることを検証します。
    def test_accepts_full_lists(self):
        snapshot = [None] * 16
        snapshot[5] = 0
        source = ListSnapshotSource([snapshot])
        assert source.next() == snapshot

    # @intent:test_case_iter 反復プロトコルで全スナップショットを読み出せることを検証します。
    def test_iteration(self):
        source = ListSnapshotSource([{0: 1}, {0: 2}, {0: 3}])
        assert [s[0] for s in source] == [1, 2, 3]
        assert not source.has_next()

    # @intent:test_case_invalid 不正なスナップショットを境界で拒否することを検証します。
    def test_rejects_invalid_snapshots(self):
        with pytest.raises(IndexError, match="Register 16 out of range for chip with 16 registers."):
            ListSnapshotSource([{16: 0}])
        with pytest.raises(ValueError, match="Snapshot has 3 registers, expected 16."):
            ListSnapshotSource([[0, 0, 0]])
        with pytest.raises(ValueError, match="Value 256 is not an 8-bit value."):
            ListSnapshotSource([{0: 256}])

    # @intent:test_case_abstract SnapshotSourceは直接インスタンス化できないことを検証します。
    def test_abstract_source(self):
        with pytest.raises(TypeError):
            SnapshotSource()
