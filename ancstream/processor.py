import logging
import dataclasses as dc
import numpy as np
from abc import ABC, abstractmethod

import ancstream.utilities as util
import ancstream.signal.adaptivefilter as af
import ancstream.signal.metrics as met
import ancstream.signal.sources as sources

logger = logging.getLogger(__name__)


@dc.dataclass
class ProcessedBlock:
    """Result of filtering one block.

    error is the denoised signal. output is computed separately as
    primary - estimate, and is numerically equal to error.
    """
    primary : np.ndarray
    reference : np.ndarray
    estimate : np.ndarray
    error : np.ndarray
    output : np.ndarray

    def __len__(self):
        return self.primary.shape[0]


def process_block(primary, reference, filter_state, step_size):
    """Runs a block of samples through the filter, one sample at a time.

    The filter state is updated in place, and is the only side effect.

    Parameters
    ----------
    primary : array_like of shape (num_samples,)
        the desired signal, containing the interference to be removed
    reference : array_like of shape (num_samples,)
        signal correlated with the interference
    filter_state : FilterState
    step_size : float

    Returns
    -------
    processed : ProcessedBlock
    """
    util.check_same_length(primary, reference)
    primary = np.asarray(primary, dtype=np.float64)
    reference = np.asarray(reference, dtype=np.float64)

    estimate, error = filter_state.process(reference, primary, step_size)
    return ProcessedBlock(
        primary = primary,
        reference = reference,
        estimate = estimate,
        error = error,
        output = primary - estimate,
    )


def validate_step_size(step_size):
    if not np.isfinite(step_size) or step_size <= 0:
        raise ValueError(f"Step size must be a positive finite number, got {step_size}")
    return float(step_size)


class AudioProcessor(ABC):
    def __init__(self, block_size):
        self.block_size = block_size
        self.name = "Abstract Processor"
        self.metadata = {}
        self.processed_blocks = 0

    def prepare(self):
        pass

    @abstractmethod
    def process(self, primary, reference=None):
        """ Processes one block of samples. Blocks must be given in order,
            as the processor keeps state from one block to the next.
        """
        pass


class NoiseCanceller(AudioProcessor):
    """Removes the component of the primary signal that is correlated with
        the reference signal, using an LMS filter.

        Parameter changes through set_step_size and set_order are applied
        at the start of the next processed block, never in the middle of one.

    Parameters
    ----------
    block_size : int
        the number of samples in each block
    filter_order : int
        number of filter taps
    step_size : float
        LMS step size mu
    reference_generator : ReferenceGenerator
        used to obtain the reference when process() is called without one.
        Defaults to a delayed and attenuated copy of the primary signal.
    dtype : numpy dtype
        storage type of the filter weights
    """
    def __init__(self, block_size, filter_order, step_size, reference_generator=None, dtype=np.float64):
        super().__init__(block_size)
        self.name = "LMS Noise Canceller"

        self.step_size = validate_step_size(step_size)
        self.filt = af.FilterState(filter_order, dtype=dtype)

        if reference_generator is None:
            self.reference_generator = sources.DelayedCopyReference()
        else:
            self.reference_generator = reference_generator

        self._pending_step_size = None
        self._pending_order = None

        self.metadata["block size"] = self.block_size
        self.metadata["filter order"] = self.filt.order
        self.metadata["step size"] = self.step_size
        self.metadata["dtype"] = str(self.filt.dtype)
        self.metadata["reference generator"] = {
            "type" : type(self.reference_generator).__name__,
            **self.reference_generator.metadata,
        }

    @property
    def filter_order(self):
        return self.filt.order

    def set_step_size(self, step_size):
        self._pending_step_size = validate_step_size(step_size)

    def set_order(self, filter_order):
        """Reinitializes the filter from zero at the new order,
            from the next processed block. Previous weights are not kept.
        """
        self._pending_order = af.validate_order(filter_order)

    def apply_pending_changes(self):
        if self._pending_step_size is not None:
            if self._pending_step_size != self.step_size:
                logger.info(f"Step size changed from {self.step_size} to {self._pending_step_size}")
            self.step_size = self._pending_step_size
            self.metadata["step size"] = self.step_size
            self._pending_step_size = None

        if self._pending_order is not None:
            if self._pending_order != self.filt.order:
                logger.info(f"Filter order changed from {self.filt.order} to {self._pending_order}, resetting filter")
                self.filt.initialize(self._pending_order)
                self.metadata["filter order"] = self.filt.order
            self._pending_order = None

    def process(self, primary, reference=None):
        """Filters one block

        Parameters
        ----------
        primary : array_like of shape (num_samples,)
        reference : array_like of shape (num_samples,) or None
            If None, the reference generator creates it from primary

        Returns
        -------
        processed : ProcessedBlock
        metrics : BlockMetrics
        """
        self.apply_pending_changes()
        primary = np.asarray(primary, dtype=np.float64)
        if primary.shape[0] != self.block_size:
            logger.debug(f"Block of length {primary.shape[0]} differs from block size {self.block_size}")
        if reference is None:
            reference = self.reference_generator.generate(primary)

        processed = process_block(primary, reference, self.filt, self.step_size)
        metrics = met.compute_block_metrics(processed)
        self.processed_blocks += 1
        return processed, metrics
