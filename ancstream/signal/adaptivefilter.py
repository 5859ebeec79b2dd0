"""Least mean squares adaptive FIR filter operating sample by sample.

The filter state (weights and tapped delay line) is owned by a FilterState
object, which is mutated in place by each call to step or process. The
delay line is ordered most-recent-first, and the estimate is always summed
in ascending tap order, so that results are reproducible down to the last bit
regardless of how the samples are divided into blocks.

The inner loops are JIT compiled using numba.
"""
import logging
import numbers
import numpy as np
import numba as nb

import ancstream.utilities as util

logger = logging.getLogger(__name__)


class InvalidOrderError(ValueError): pass


def validate_order(order):
    if isinstance(order, (bool, np.bool_)) or not isinstance(order, numbers.Integral):
        raise InvalidOrderError(f"Filter order must be an integer, got {order!r}")
    if order <= 0:
        raise InvalidOrderError(f"Filter order must be positive, got {order}")
    return int(order)


@nb.njit
def _lms_step(weights, delay_line, input_sample, desired_sample, step_size):
    order = delay_line.shape[0]
    for i in range(order - 1, 0, -1):
        delay_line[i] = delay_line[i - 1]
    delay_line[0] = input_sample

    estimate = 0.0
    for i in range(order):
        estimate += np.float64(weights[i]) * np.float64(delay_line[i])

    error = desired_sample - estimate
    for i in range(order):
        weights[i] += step_size * error * np.float64(delay_line[i])
    return estimate, error


@nb.njit
def _lms_block(weights, delay_line, reference, desired, step_size, estimate, error):
    for n in range(reference.shape[0]):
        y, e = _lms_step(weights, delay_line, reference[n], desired[n], step_size)
        estimate[n] = y
        error[n] = e


class FilterState:
    """Weights and delay line of a single channel LMS filter

    Parameters
    ----------
    order : int
        The number of filter taps. Must be positive.
    dtype : numpy dtype
        float64 or float32. Decides how weights and delay line are stored.
        Stored values are widened to double before every product, and the
        estimate and the error are always accumulated in double precision.
    """
    def __init__(self, order, dtype=np.float64):
        self.dtype = np.dtype(dtype)
        if self.dtype not in (np.float32, np.float64):
            raise ValueError(f"Unsupported dtype {self.dtype}")
        self.initialize(order)

    def initialize(self, order):
        """Discards all previous state and sets the new filter order.

        Weights and delay line are zero afterwards.
        """
        self.order = validate_order(order)
        self.weights = np.zeros(self.order, dtype=self.dtype)
        self.delay_line = np.zeros(self.order, dtype=self.dtype)
        self._diverged = False
        logger.debug(f"Filter initialized with order {self.order}")

    def reset(self):
        self.initialize(self.order)

    def step(self, input_sample, desired_sample, step_size):
        """Processes one sample and updates the weights

        Parameters
        ----------
        input_sample : float
            the newest reference sample, which is inserted in the delay line
        desired_sample : float
            the primary sample that the filter tries to estimate
        step_size : float
            the LMS step size mu

        Returns
        -------
        estimate : float
            the filter output before the weights were updated
        error : float
            desired_sample - estimate
        """
        estimate, error = _lms_step(self.weights, self.delay_line,
                        float(input_sample), float(desired_sample), float(step_size))
        self._check_divergence()
        return estimate, error

    def process(self, reference, desired, step_size):
        """Runs step for every sample of a block, in order.

        Gives identical results to calling step once per sample.

        Parameters
        ----------
        reference : ndarray of shape (num_samples,)
        desired : ndarray of shape (num_samples,)
        step_size : float

        Returns
        -------
        estimate : ndarray of shape (num_samples,)
        error : ndarray of shape (num_samples,)
        """
        reference = np.ascontiguousarray(reference, dtype=np.float64)
        desired = np.ascontiguousarray(desired, dtype=np.float64)
        if reference.ndim != 1 or desired.ndim != 1:
            raise ValueError("Only single channel blocks of shape (num_samples,) are supported")
        util.check_same_length(reference, desired)

        estimate = np.zeros(reference.shape[0])
        error = np.zeros(reference.shape[0])
        _lms_block(self.weights, self.delay_line, reference, desired,
                    float(step_size), estimate, error)
        self._check_divergence()
        return estimate, error

    def _check_divergence(self):
        finite = np.all(np.isfinite(self.weights))
        if not finite and not self._diverged:
            logger.warning("Filter weights are no longer finite, the step size is likely too large for the input power")
        self._diverged = not finite

    @property
    def diverged(self):
        return self._diverged
