import pytest

from maze.alignment import ChainAligner
from maze.sizing import SizeSequencer


def test_first_two_segments():
    aligner = ChainAligner(SizeSequencer(5, 2), alignment_x=1)
    assert aligner.entrance(0) == (1, 0)
    assert aligner.exit(0) == (1, 4)
    assert aligner.entrance(1) == (1, 0)
    assert aligner.exit(1) == (1, 6)


@pytest.mark.parametrize("alignment_x", [0, 1, 2, 3, 10])
@pytest.mark.parametrize("increment", [0, 1, 2])
def test_entrance_follows_previous_exit(alignment_x, increment):
    seq = SizeSequencer(5, increment)
    aligner = ChainAligner(seq, alignment_x=alignment_x)
    for i in range(1, 30):
        expected = max(1, min(aligner.exit(i - 1)[0], seq.size(i) - 2))
        assert aligner.entrance(i)[0] == expected
        assert aligner.exit(i)[0] == aligner.entrance(i)[0]
        assert aligner.exit(i)[1] == seq.size(i) - 1


def test_large_alignment_is_clamped():
    aligner = ChainAligner(SizeSequencer(5, 2), alignment_x=10)
    assert aligner.entrance(0) == (3, 0)
    assert aligner.entrance(1) == (3, 0)


def test_far_index_without_generation():
    aligner = ChainAligner(SizeSequencer(), alignment_x=1)
    assert aligner.exit(5000) == (1, 5 + 2 * 5000 - 1)


def test_host_signatures():
    aligner = ChainAligner(SizeSequencer(), alignment_x=1)
    assert aligner.entrance_for(7, 1) == (1, 0)
    assert aligner.exit_for(7, 1) == (1, 6)
    assert aligner.exit_for(3, 0) == (1, 2)


def test_negative_index_rejected():
    aligner = ChainAligner(SizeSequencer())
    with pytest.raises(ValueError):
        aligner.entrance(-1)
    with pytest.raises(ValueError):
        aligner.entrance_for(5, -1)
