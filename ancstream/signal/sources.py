import numpy as np
from abc import ABC, abstractmethod

import ancstream.utilities as util


def generate_reference(primary, delay_samples, attenuation):
    """Delayed and attenuated copy of the primary signal

    reference[n] = primary[max(n - delay_samples, 0)] * attenuation

    The first delay_samples values hold the first primary sample
    instead of being zero.

    Parameters
    ----------
    primary : ndarray of shape (num_samples,)
    delay_samples : int
        non-negative delay in samples
    attenuation : float
        scaling applied to every sample

    Returns
    -------
    reference : ndarray of shape (num_samples,)
    """
    if delay_samples < 0:
        raise ValueError(f"Delay must be non-negative, got {delay_samples}")
    primary = np.asarray(primary)
    idxs = np.maximum(np.arange(primary.shape[0]) - int(delay_samples), 0)
    return primary[idxs] * attenuation


class ReferenceGenerator(ABC):
    """Produces the reference block for a primary block.

    A real second microphone does not need a generator, its block
    can be given directly to the processor instead.
    """
    def __init__(self):
        self.metadata = {}

    @abstractmethod
    def generate(self, primary):
        pass


class DelayedCopyReference(ReferenceGenerator):
    def __init__(self, delay_samples=5, attenuation=0.9):
        super().__init__()
        if delay_samples < 0:
            raise ValueError(f"Delay must be non-negative, got {delay_samples}")
        self.delay_samples = delay_samples
        self.attenuation = attenuation

        self.metadata["delay samples"] = self.delay_samples
        self.metadata["attenuation"] = self.attenuation

    def generate(self, primary):
        return generate_reference(primary, self.delay_samples, self.attenuation)




class Source(ABC):
    """Single channel signal, obtained block by block with get_samples"""
    def __init__(self, rng=None):
        if rng is None:
            self.rng = np.random.default_rng(123456)
        else:
            self.rng = rng
        self.metadata = {}

    @abstractmethod
    def get_samples(self, num_samples):
        return np.zeros(num_samples)


class SumSource(Source):
    def __init__(self, *sources):
        super().__init__()
        self.sources = sources
        self.metadata["sources"] = [src.metadata for src in self.sources]

    def get_samples(self, num_samples):
        return np.sum([src.get_samples(num_samples) for src in self.sources], axis=0)


class Sequence(Source):
    def __init__(self, audio, amp_factor = 1, end_mode = "repeat"):
        """ Will play the supplied sequence

        Parameters
        ----------
        audio is np.ndarray of audio samples to be played.
                    Shape is (num_samples,)
        end_mode : can be any of {'repeat', 'raise'}
            with 'repeat' the sequence starts over again indefinitely
            with 'raise' the source will raise an exception if get_samples()
            is called after the sequence is finished
        """
        assert isinstance(audio, np.ndarray)
        if audio.ndim == 2 and audio.shape[0] == 1:
            audio = audio[0,:]
        elif audio.ndim != 1:
            raise ValueError("Only single channel audio is supported")
        super().__init__()

        self.audio = audio
        self.amp_factor = amp_factor
        self.end_mode = end_mode
        self.tot_samples = audio.shape[0]
        self.current_sample = 0
        self.metadata["number of samples"] = self.tot_samples
        self.metadata["end mode"] = self.end_mode

    def get_samples(self, num_samples):
        sig = np.zeros(num_samples)
        if self.end_mode == "repeat":
            block_lengths = util.calc_block_sizes(num_samples, self.current_sample, self.tot_samples)
            i = 0
            for block_len in block_lengths:
                sig[i:i+block_len] = self.audio[self.current_sample:self.current_sample+block_len]
                self.current_sample = (self.current_sample + block_len) % self.tot_samples
                i += block_len
        elif self.end_mode == "raise":
            if self.current_sample + num_samples > self.tot_samples:
                raise StopIteration("End of audio signal")

            sig = self.audio[self.current_sample:self.current_sample+num_samples]
            self.current_sample += num_samples
        else:
            raise ValueError("Invalid end mode")
        return sig * self.amp_factor


class WhiteNoiseSource(Source):
    def __init__(self, power, rng=None):
        super().__init__(rng)
        self.set_power(power)
        self.metadata["power"] = self.power

    def get_samples(self, num_samples):
        return self.rng.normal(loc=0, scale=self.std_dev, size=num_samples)

    def set_power(self, new_power):
        assert new_power >= 0
        self.power = new_power
        self.std_dev = np.sqrt(new_power)


class SineSource(Source):
    def __init__(self, power, freq, samplerate, phase=None, rng=None):
        super().__init__(rng)
        self.power = power
        self.amplitude = np.sqrt(2 * self.power)
        # p = a^2 / 2
        # 2p = a^2
        # sqrt(2p) = a
        self.freq = freq
        self.samplerate = samplerate
        if phase is None:
            self.phase = self.rng.uniform(low=0, high=2 * np.pi)
        else:
            self.phase = phase

        self.phase_per_sample = 2 * np.pi * self.freq / self.samplerate

        self.metadata["power"] = self.power
        self.metadata["frequency"] = self.freq

    def get_samples(self, num_samples):
        sig = self.amplitude * np.cos(self.phase_per_sample * np.arange(num_samples) + self.phase)
        self.phase = (self.phase + num_samples * self.phase_per_sample) % (2 * np.pi)
        return sig
