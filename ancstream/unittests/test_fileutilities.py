import json
import datetime
import pytest

import ancstream.fileutilities as futil
import ancstream.configutil as configutil
import ancstream.processor as proc


@pytest.fixture
def now():
    return datetime.datetime(2024, 3, 7, 9, 5, 41)


def test_session_folder_name_and_index(tmp_path, now):
    first = futil.create_session_folder(tmp_path, now)
    second = futil.create_session_folder(tmp_path, now)
    assert first == tmp_path.joinpath("session_2024_03_07_09_05_0")
    assert second == tmp_path.joinpath("session_2024_03_07_09_05_1")
    assert first.is_dir()
    assert second.is_dir()


def test_session_folder_takes_lowest_free_index(tmp_path, now):
    tmp_path.joinpath("session_2024_03_07_09_05_0").mkdir()
    tmp_path.joinpath("session_2024_03_07_09_05_2").mkdir()
    folder = futil.create_session_folder(tmp_path, now)
    assert folder.name == "session_2024_03_07_09_05_1"


def test_session_folder_creates_missing_parents(tmp_path, now):
    parent = tmp_path.joinpath("figs", "live")
    folder = futil.create_session_folder(parent, now)
    assert folder.parent == parent
    assert folder.is_dir()


def test_metadata_is_merged_with_existing_file(tmp_path):
    with open(tmp_path.joinpath(futil.METADATA_FILE), "w") as f:
        json.dump({"microphone": "left", "samplerate": 1}, f)

    info = configutil.load_default_config()
    canceller = proc.NoiseCanceller(info.block_size, 6, 0.02)
    canceller.processed_blocks = 4
    futil.write_session_metadata(tmp_path, canceller, info)

    with open(tmp_path.joinpath(futil.METADATA_FILE)) as f:
        metadata = json.load(f)
    assert metadata["microphone"] == "left"
    assert metadata["samplerate"] == info.samplerate
    assert metadata["block size"] == info.block_size
    assert metadata["processed blocks"] == 4
    assert metadata[canceller.name]["filter order"] == 6
    assert metadata[canceller.name]["step size"] == 0.02
