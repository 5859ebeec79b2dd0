import dataclasses as dc
import numpy as np
import numba as nb

import ancstream.utilities as util

POWER_FLOOR = 1e-12


@nb.njit
def _mean_square(signal):
    total = 0.0
    for i in range(signal.shape[0]):
        total += signal[i] * signal[i]
    return total / signal.shape[0]


def _as_signal(signal):
    return np.ascontiguousarray(signal, dtype=np.float64)


def compute_power(signal):
    """Mean of the squared samples, never lower than POWER_FLOOR.

    NaN is passed through unchanged.
    """
    signal = _as_signal(signal)
    if signal.shape[0] == 0:
        return POWER_FLOOR
    power = _mean_square(signal)
    if power < POWER_FLOOR:
        return POWER_FLOOR
    return power


def compute_snr(signal, noise):
    """Power ratio in dB between two equally long signals"""
    util.check_same_length(signal, noise)
    return 10 * np.log10(compute_power(signal) / compute_power(noise))


def compute_mse(error, target=None):
    """Mean of the squared error samples

    If target is given, error is treated as an estimate of target
    and the mean squared difference is returned.
    """
    if target is not None:
        util.check_same_length(error, target)
        error = _as_signal(target) - _as_signal(error)
    error = _as_signal(error)
    if error.shape[0] == 0:
        return np.nan
    return _mean_square(error)


@dc.dataclass
class BlockMetrics:
    mse : float
    snr_before : float
    snr_after : float


def compute_block_metrics(processed_block):
    """Metrics of one block that has been run through the filter.

    The SNR before filtering compares the primary signal against the reference.
    The SNR after filtering compares the filtered output against the error, which
    is a proxy measure, as no clean signal is available.
    """
    return BlockMetrics(
        mse = compute_mse(processed_block.error),
        snr_before = compute_snr(processed_block.primary, processed_block.reference),
        snr_after = compute_snr(processed_block.output, processed_block.error),
    )


def format_metrics(metrics):
    return {
        "mse" : f"{metrics.mse:.6f}",
        "snr_before" : f"{metrics.snr_before:.2f} dB",
        "snr_after" : f"{metrics.snr_after:.2f} dB",
    }
