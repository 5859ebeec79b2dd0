from pathlib import Path
import yaml
import dataclasses as dc


@dc.dataclass
class SessionInfo:
    samplerate : int
    block_size : int

    filter_order : int
    step_size : float
    reference_delay : int
    reference_attenuation : float
    dtype : str

    fft_size : int
    smoothing_time_constant : float
    min_decibels : float
    max_decibels : float

    plot_output : str
    log_level : str
    log_format : str

    def __post_init__(self):
        assert self.samplerate > 0
        assert self.block_size > 0
        assert self.reference_delay >= 0
        assert self.dtype in ("float32", "float64")
        assert self.plot_output in ("none", "png", "pdf")
        assert self.log_format in ("text", "json")

    def save_to_file(self, path):
        if path is not None:
            with open(Path(path).joinpath("config.yaml"), "w") as f:
                yaml.dump(dc.asdict(self), f, sort_keys=False)


def load_from_file(path):
    path = Path(path)
    if path.is_dir():
        path = path.joinpath("config.yaml")

    with open(path) as f:
        config = yaml.safe_load(f)
    return SessionInfo(**config)


def load_default_config():
    path = Path(__file__).parent.joinpath("config.yaml")
    return load_from_file(path)
