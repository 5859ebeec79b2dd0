import copy
import logging
import dataclasses as dc
from pathlib import Path
import numpy as np

import ancstream.configutil as configutil
import ancstream.fileutilities as futil
import ancstream.logutil as logutil
import ancstream.diagnostics as diag
import ancstream.processor as proc
import ancstream.signal.adaptivefilter as af
import ancstream.signal.analyser as an
import ancstream.signal.metrics as met
import ancstream.signal.sources as sources

logger = logging.getLogger(__name__)


class SessionSetup:
    def __init__(
        self,
        base_fig_path=None,
        config_path=None,
        ):
        """
        Parameters
        ----------
        base_fig_path : str or Path from pathlib
            If this is supplied, each session will create a new
            subfolder in that directory and fill it with config, metadata,
            metrics and figures.
        config_path : str or Path from pathlib
            Supply if you want to load the config parameters from a (yaml) file.
            Otherwise the default will be loaded, which can be changed inside your
            Python code through setup.session_info
        """
        if config_path is None:
            self.session_info = configutil.load_default_config()
        else:
            self.session_info = configutil.load_from_file(config_path)

        if base_fig_path is not None:
            base_fig_path = Path(base_fig_path)
        self.base_fig_path = base_fig_path

    def create_session(self, reference_generator=None):
        """Applies the logging settings of the config and returns a stopped Session"""
        session_info = copy.deepcopy(self.session_info)
        logutil.setup_logging(session_info.log_level, session_info.log_format)

        folder_path = None
        if self.base_fig_path is not None:
            folder_path = futil.create_session_folder(self.base_fig_path)
            logger.info(f"Session folder: {folder_path}")
            session_info.save_to_file(folder_path)
        return Session(session_info, folder_path, reference_generator)


@dc.dataclass
class BlockResult:
    """Everything produced for one block, for display or further use"""
    processed : proc.ProcessedBlock
    metrics : met.BlockMetrics
    display : dict
    waveform : np.ndarray
    spectrum : np.ndarray


class Session:
    """A running noise cancellation session

    Owns the filter state from start() until stop(). Blocks must be given
    to process() one at a time and in order, from a single caller.
    """
    def __init__(self, session_info, folder_path=None, reference_generator=None):
        self.session_info = session_info
        self.folder_path = folder_path
        self.reference_generator = reference_generator

        self.processor = None
        self.analyser = None
        self.history = None

    @property
    def started(self):
        return self.processor is not None

    def start(self):
        if self.started:
            return
        info = self.session_info

        if self.reference_generator is None:
            reference_generator = sources.DelayedCopyReference(info.reference_delay, info.reference_attenuation)
        else:
            reference_generator = self.reference_generator

        self.processor = proc.NoiseCanceller(
            info.block_size,
            info.filter_order,
            info.step_size,
            reference_generator=reference_generator,
            dtype=np.dtype(info.dtype),
        )
        self.processor.prepare()
        self.analyser = an.Analyser(
            info.fft_size,
            info.smoothing_time_constant,
            info.min_decibels,
            info.max_decibels,
            info.samplerate,
        )
        self.history = diag.MetricsHistory(info.block_size, info.samplerate)
        logger.info(f"Session started with filter order {info.filter_order}, step size {info.step_size}, samplerate {info.samplerate}")

    def stop(self):
        """Discards the filter state. The metric history is exported to
            the session folder and kept in self.history until the next start.
        """
        if not self.started:
            return
        if self.folder_path is not None:
            futil.write_session_metadata(self.folder_path, self.processor, self.session_info)
            self.history.save_to_file(self.folder_path)
            self.history.plot(self.folder_path, self.session_info.plot_output)

        logger.info(f"Session stopped after {self.processor.processed_blocks} blocks")
        self.processor = None
        self.analyser = None

    def set_step_size(self, step_size):
        """Takes effect from the next processed block"""
        self.session_info.step_size = proc.validate_step_size(step_size)
        if self.started:
            self.processor.set_step_size(step_size)

    def set_filter_order(self, filter_order):
        """Takes effect from the next processed block, and restarts the
            filter from zero weights.
        """
        filter_order = af.validate_order(filter_order)
        if self.started:
            self.processor.set_order(filter_order)
        self.session_info.filter_order = filter_order

    def set_samplerate(self, samplerate):
        if self.started:
            raise RuntimeError("The samplerate can only be changed while the session is stopped")
        assert samplerate > 0
        self.session_info.samplerate = samplerate

    def process(self, primary, reference=None):
        """Processes one captured block

        Parameters
        ----------
        primary : array_like of shape (block_size,)
        reference : array_like of shape (block_size,) or None
            a measured reference signal. If None, it is generated from primary

        Returns
        -------
        result : BlockResult
        """
        if not self.started:
            raise RuntimeError("Session must be started before processing")

        processed, metrics = self.processor.process(primary, reference)
        self.analyser.push(processed.primary)
        self.history.save(metrics)

        return BlockResult(
            processed = processed,
            metrics = metrics,
            display = met.format_metrics(metrics),
            waveform = self.analyser.get_time_domain_data(),
            spectrum = self.analyser.get_frequency_data(),
        )

    def run(self, source, num_blocks):
        """Pulls num_blocks blocks from the source and processes them in order.

        The session is started if needed, but not stopped afterwards.

        Returns
        -------
        history : MetricsHistory
        """
        self.start()
        for _ in range(num_blocks):
            self.process(source.get_samples(self.session_info.block_size))
        return self.history
