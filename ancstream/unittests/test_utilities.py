import numpy as np
import pytest
import hypothesis as hyp
import hypothesis.strategies as st

import ancstream.utilities as util


@hyp.given(
    st.integers(min_value=1, max_value=10000), st.integers(min_value=1, max_value=10000)
)
def test_calc_block_sizes_total_equal_to_num_samples(num_samples, block_size):
    start_idx = np.random.randint(0, block_size)
    sizes = util.calc_block_sizes(num_samples, start_idx, block_size)
    assert np.sum(sizes) == num_samples


@hyp.given(
    st.integers(min_value=1, max_value=10000), st.integers(min_value=1, max_value=10000)
)
def test_calc_block_sizes_max_value_equal_to_block_length(num_samples, block_size):
    start_idx = np.random.randint(0, block_size)
    sizes = util.calc_block_sizes(num_samples, start_idx, block_size)
    assert np.max(sizes) <= block_size
    assert np.min(sizes) > 0


def test_check_same_length():
    util.check_same_length([1, 2], np.zeros(2), (3, 4))
    with pytest.raises(util.LengthMismatchError):
        util.check_same_length([1, 2], [1, 2, 3])


@hyp.given(
    num_samples = st.integers(min_value=0, max_value=100),
    block_size = st.integers(min_value=1, max_value=20),
)
def test_block_iterator_gives_only_whole_blocks(num_samples, block_size):
    blocks = list(util.block_iterator(np.arange(num_samples), block_size))
    assert len(blocks) == num_samples // block_size
    assert all(len(block) == block_size for block in blocks)
    if len(blocks) > 0:
        assert np.array_equal(np.concatenate(blocks), np.arange(len(blocks) * block_size))


def test_db_conversions():
    assert util.pow2db(100) == pytest.approx(20)
    assert util.db2pow(util.pow2db(3.5)) == pytest.approx(3.5)
    assert util.mag2db(10) == pytest.approx(20)
