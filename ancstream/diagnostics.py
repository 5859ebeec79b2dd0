import json
import logging
import numpy as np
import matplotlib.pyplot as plt

import ancstream.utilities as util

logger = logging.getLogger(__name__)


class MetricsHistory:
    """Records the metrics of every processed block of a session.

    Each block is independent, nothing is averaged over blocks.
    """
    def __init__(self, block_size, samplerate):
        self.block_size = block_size
        self.samplerate = samplerate
        self.mse = []
        self.snr_before = []
        self.snr_after = []

    @property
    def num_blocks(self):
        return len(self.mse)

    def save(self, metrics):
        self.mse.append(metrics.mse)
        self.snr_before.append(metrics.snr_before)
        self.snr_after.append(metrics.snr_after)

    def get_output(self):
        return {
            "mse" : np.array(self.mse, dtype=float),
            "snr_before" : np.array(self.snr_before, dtype=float),
            "snr_after" : np.array(self.snr_after, dtype=float),
        }

    def block_times(self):
        """Time in seconds at the end of each block"""
        return (np.arange(self.num_blocks) + 1) * self.block_size / self.samplerate

    def save_to_file(self, folder_path):
        output = {name : values.tolist() for name, values in self.get_output().items()}
        output["block_size"] = self.block_size
        output["samplerate"] = self.samplerate
        with open(folder_path.joinpath("metrics.json"), "w") as f:
            json.dump(output, f, indent=4)

    def plot(self, folder_path, output_format):
        if output_format == "none" or self.num_blocks == 0:
            return
        output = self.get_output()
        times = self.block_times()

        fig, axes = plt.subplots(2, 1, figsize=(8, 6), sharex=True)
        with np.errstate(divide="ignore"):
            axes[0].plot(times, util.pow2db(output["mse"]))
        axes[0].set_ylabel("MSE (dB)")
        axes[0].set_title("Learning curve")

        axes[1].plot(times, output["snr_before"], label="before")
        axes[1].plot(times, output["snr_after"], label="after")
        axes[1].set_ylabel("SNR (dB)")
        axes[1].set_xlabel("Time (s)")
        axes[1].legend()

        for ax in axes:
            ax.grid(True)
        file_path = folder_path.joinpath(f"learning_curve.{output_format}")
        fig.savefig(file_path)
        plt.close(fig)
        logger.info(f"Saved figure {file_path}")
