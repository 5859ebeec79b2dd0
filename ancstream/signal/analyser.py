"""Time and frequency domain display data for the most recent samples.

Behaves like a browser audio analyser node. The newest fft_size input
samples are kept, and the magnitude spectrum is computed from them with a
Blackman window, normalized by fft_size and smoothed over consecutive
pushes with a first order recursive average before conversion to dB.
"""
import numpy as np
import scipy.signal.windows as win

import ancstream.utilities as util

MIN_FFT_SIZE = 32
MAX_FFT_SIZE = 32768


class Analyser:
    def __init__(
        self,
        fft_size=2048,
        smoothing_time_constant=0.2,
        min_decibels=-100,
        max_decibels=-30,
        samplerate=44100,
        ):
        if fft_size < MIN_FFT_SIZE or fft_size > MAX_FFT_SIZE or (fft_size & (fft_size - 1)) != 0:
            raise ValueError(f"fft_size must be a power of two between {MIN_FFT_SIZE} and {MAX_FFT_SIZE}, got {fft_size}")
        if not 0 <= smoothing_time_constant <= 1:
            raise ValueError(f"smoothing_time_constant must be in [0, 1], got {smoothing_time_constant}")
        if min_decibels >= max_decibels:
            raise ValueError("min_decibels must be lower than max_decibels")

        self.fft_size = fft_size
        self.smoothing_time_constant = smoothing_time_constant
        self.min_decibels = min_decibels
        self.max_decibels = max_decibels
        self.samplerate = samplerate

        self.window = win.blackman(self.fft_size, sym=False)
        self.buffer = np.zeros(self.fft_size)
        self.smoothed_magnitude = np.zeros(self.frequency_bin_count)
        self._spectrum_db = None

    @property
    def frequency_bin_count(self):
        return self.fft_size // 2

    @property
    def frequencies(self):
        return np.arange(self.frequency_bin_count) * self.samplerate / self.fft_size

    def push(self, samples):
        """Adds new samples, dropping the oldest ones"""
        samples = np.asarray(samples, dtype=np.float64)
        if samples.shape[0] >= self.fft_size:
            self.buffer[:] = samples[-self.fft_size:]
        else:
            self.buffer[:] = np.concatenate((self.buffer[samples.shape[0]:], samples))
        self._spectrum_db = None

    def get_time_domain_data(self):
        return self.buffer.copy()

    def get_frequency_data(self):
        """Smoothed magnitude spectrum in dB, of shape (fft_size // 2,)

        The smoothing advances once per push, repeated calls without
        new samples give the same spectrum.
        """
        if self._spectrum_db is None:
            spectrum = np.fft.rfft(self.buffer * self.window)[:self.frequency_bin_count]
            magnitude = np.abs(spectrum) / self.fft_size
            self.smoothed_magnitude = self.smoothing_time_constant * self.smoothed_magnitude + \
                                        (1 - self.smoothing_time_constant) * magnitude
            with np.errstate(divide="ignore"):
                self._spectrum_db = util.mag2db(self.smoothed_magnitude)
        return self._spectrum_db.copy()

    def get_byte_frequency_data(self):
        db = self.get_frequency_data()
        scaled = 255 * (db - self.min_decibels) / (self.max_decibels - self.min_decibels)
        return np.clip(np.floor(scaled), 0, 255).astype(np.uint8)

    def reset(self):
        self.buffer[:] = 0
        self.smoothed_magnitude[:] = 0
        self._spectrum_db = None
