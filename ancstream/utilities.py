import numpy as np


class LengthMismatchError(ValueError): pass


def check_same_length(*signals):
    """Raises LengthMismatchError unless all signals have the same number of samples"""
    lengths = [len(sig) for sig in signals]
    if any(length != lengths[0] for length in lengths):
        raise LengthMismatchError(f"Signals must have equal length, got lengths {lengths}")


def calc_block_sizes(num_samples, start_idx, block_size):
    left_in_block = block_size - start_idx
    sample_counter = 0
    block_sizes = []
    while sample_counter < num_samples:
        block_len = int(np.min((num_samples - sample_counter, left_in_block)))
        block_sizes.append(block_len)
        sample_counter += block_len
        left_in_block -= block_len
        if left_in_block == 0:
            left_in_block = block_size
    return block_sizes


def block_iterator(signal, block_size):
    """Use as
        for block in block_iterator(signal, block_size):
            process(block)

        Only whole blocks are given, any trailing samples
        that do not fill a block are left out.
    """
    num_blocks = len(signal) // block_size
    for i in range(num_blocks):
        yield signal[i*block_size:(i+1)*block_size]


def pow2db(power):
    return 10 * np.log10(power)


def db2pow(db):
    return 10 ** (db / 10)


def mag2db(amplitude):
    return 20 * np.log10(amplitude)
