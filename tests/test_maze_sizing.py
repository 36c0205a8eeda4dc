import pytest

from maze.sizing import SizeSequencer


def test_default_sequence():
    seq = SizeSequencer()
    assert seq.sizes(4) == [5, 7, 9, 11]
    assert seq(1) == 7


def test_far_indices_are_computable():
    assert SizeSequencer().size(1000) == 2005


def test_monotonic():
    seq = SizeSequencer(base=4, increment=3)
    sizes = seq.sizes(50)
    assert all(a < b for a, b in zip(sizes, sizes[1:]))


def test_zero_increment_is_flat():
    assert SizeSequencer(base=6, increment=0).sizes(3) == [6, 6, 6]


def test_negative_index_rejected():
    with pytest.raises(ValueError):
        SizeSequencer().size(-1)


def test_invalid_parameters():
    with pytest.raises(ValueError):
        SizeSequencer(base=1)
    with pytest.raises(ValueError):
        SizeSequencer(increment=-2)
