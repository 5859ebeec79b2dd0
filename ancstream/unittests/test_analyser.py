import numpy as np
import pytest

import ancstream.signal.analyser as an


@pytest.mark.parametrize("fft_size", [16, 100, 65536, 1000])
def test_invalid_fft_size_is_rejected(fft_size):
    with pytest.raises(ValueError):
        an.Analyser(fft_size)


def test_invalid_smoothing_is_rejected():
    with pytest.raises(ValueError):
        an.Analyser(64, smoothing_time_constant=1.5)


def test_time_domain_data_keeps_newest_samples():
    analyser = an.Analyser(32)
    analyser.push(np.arange(20, dtype=float))
    data = analyser.get_time_domain_data()
    assert data.shape == (32,)
    assert np.all(data[:12] == 0)
    assert np.array_equal(data[12:], np.arange(20))

    analyser.push(np.arange(100, 140, dtype=float))
    assert np.array_equal(analyser.get_time_domain_data(), np.arange(108, 140))


def test_time_domain_data_is_a_copy():
    analyser = an.Analyser(32)
    data = analyser.get_time_domain_data()
    data[:] = 1
    assert np.all(analyser.get_time_domain_data() == 0)


def test_spectrum_peak_at_tone_frequency():
    samplerate = 8000
    fft_size = 1024
    freq = samplerate * 64 / fft_size
    analyser = an.Analyser(fft_size, samplerate=samplerate)
    analyser.push(np.sin(2 * np.pi * freq * np.arange(fft_size) / samplerate))

    spectrum = analyser.get_frequency_data()
    assert spectrum.shape == (fft_size // 2,)
    assert np.argmax(spectrum) == 64
    assert analyser.frequencies[64] == pytest.approx(freq)


def test_spectrum_of_silence_is_minus_infinity():
    analyser = an.Analyser(64)
    assert np.all(np.isneginf(analyser.get_frequency_data()))
    assert np.all(analyser.get_byte_frequency_data() == 0)


def test_smoothing_over_pushes():
    analyser = an.Analyser(64, smoothing_time_constant=0.5)
    analyser.push(np.ones(64))
    first = analyser.get_frequency_data()
    analyser.push(np.ones(64))
    second = analyser.get_frequency_data()
    # the smoothed magnitude goes from 0.5 to 0.75 of the true magnitude
    assert second[0] - first[0] == pytest.approx(20 * np.log10(1.5))


def test_no_smoothing_gives_window_mean_at_dc():
    analyser = an.Analyser(64, smoothing_time_constant=0)
    analyser.push(np.ones(64))
    assert analyser.get_frequency_data()[0] == pytest.approx(20 * np.log10(np.mean(analyser.window)))


def test_byte_data_is_within_range():
    analyser = an.Analyser(256)
    analyser.push(np.random.default_rng(0).normal(size=256))
    data = analyser.get_byte_frequency_data()
    assert data.dtype == np.uint8
    assert data.shape == (128,)


def test_reset():
    analyser = an.Analyser(32)
    analyser.push(np.ones(32))
    analyser.get_frequency_data()
    analyser.reset()
    assert np.all(analyser.get_time_domain_data() == 0)
    assert np.all(analyser.smoothed_magnitude == 0)


def test_smoothing_advances_once_per_push():
    analyser = an.Analyser(64, smoothing_time_constant=0.5)
    analyser.push(np.ones(64))
    first = analyser.get_frequency_data()
    analyser.get_byte_frequency_data()
    second = analyser.get_frequency_data()
    assert np.array_equal(first, second)
    # a single smoothing step from zero gives half the true magnitude
    assert first[0] == pytest.approx(20 * np.log10(0.5 * np.mean(analyser.window)))


def test_returned_spectrum_is_a_copy():
    analyser = an.Analyser(64)
    analyser.push(np.ones(64))
    spectrum = analyser.get_frequency_data()
    spectrum[:] = 0
    assert analyser.get_frequency_data()[0] != 0
