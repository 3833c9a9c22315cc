# tests/test_memory.py
"""
Tests for the two-tier cell store.
"""

import pytest

from intcode import AddressFault, AddressingError, Memory


class TestMemory:

    def test_dense_read_write(self):
        mem = Memory([1, 2, 3], 0)
        mem.write(1, 20)
        assert mem.read(1) == 20
        assert mem.dump() == [1, 20, 3]
        assert mem.sparse_items() == []

    def test_unwritten_cells_read_zero(self):
        mem = Memory([1], 0)
        assert mem.read(10**12) == 0
        assert mem.sparse_items() == []

    def test_sparse_write(self):
        mem = Memory([1], 0)
        mem.write(50, 9)
        mem.write(7, 4)
        assert mem.read(50) == 9
        assert mem.sparse_items() == [(7, 4), (50, 9)]
        assert len(mem) == 1

    def test_zero_value_is_configurable(self):
        sentinel = object()
        mem = Memory([], sentinel)
        assert mem.read(3) is sentinel

    def test_negative_address(self):
        mem = Memory([1], 0)
        with pytest.raises(AddressingError) as exc_info:
            mem.read(-1)
        assert exc_info.value.fault is AddressFault.NEGATIVE

    def test_max_address(self):
        mem = Memory([1], 0, max_address=100)
        mem.write(100, 1)
        with pytest.raises(AddressingError) as exc_info:
            mem.write(101, 1)
        assert exc_info.value.fault is AddressFault.TOO_FAR

    def test_check_carries_pc(self):
        mem = Memory([], 0, max_address=5)
        with pytest.raises(AddressingError) as exc_info:
            mem.check(6, pc=12)
        assert exc_info.value.pc == 12
        assert mem.check(5) == 5

    def test_reset(self):
        mem = Memory([1, 2], 0)
        mem.write(0, 5)
        mem.write(9, 5)
        mem.reset([7])
        assert mem.dump() == [7]
        assert mem.read(9) == 0
        assert mem.sparse_items() == []

    def test_dense_tier_is_a_copy(self):
        image = [1, 2]
        mem = Memory(image, 0)
        mem.write(0, 9)
        assert image == [1, 2]
        assert "dense=2" in repr(mem)
