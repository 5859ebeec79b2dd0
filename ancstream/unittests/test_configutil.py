import dataclasses as dc
import pytest

import ancstream.configutil as configutil


def test_default_config():
    info = configutil.load_default_config()
    assert info.samplerate == 44100
    assert info.block_size == 1024
    assert info.filter_order == 32
    assert info.reference_delay == 5
    assert info.reference_attenuation == pytest.approx(0.9)
    assert info.fft_size == 2048
    assert info.smoothing_time_constant == pytest.approx(0.2)


def test_save_and_load(tmp_path):
    info = configutil.load_default_config()
    info.filter_order = 12
    info.step_size = 0.003
    info.save_to_file(tmp_path)

    from_folder = configutil.load_from_file(tmp_path)
    from_file = configutil.load_from_file(tmp_path.joinpath("config.yaml"))
    assert from_folder == info
    assert from_file == info


def test_save_without_path_does_nothing():
    configutil.load_default_config().save_to_file(None)


@pytest.mark.parametrize("field, value", [
    ("dtype", "int16"),
    ("plot_output", "svg"),
    ("log_format", "xml"),
    ("samplerate", 0),
    ("reference_delay", -1),
])
def test_invalid_config_is_rejected(field, value):
    info = configutil.load_default_config()
    with pytest.raises(AssertionError):
        configutil.SessionInfo(**{**dc.asdict(info), field : value})
