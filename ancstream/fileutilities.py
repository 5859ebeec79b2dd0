import json
import datetime

SESSION_PREFIX = "session_"
METADATA_FILE = "metadata.json"


def create_session_folder(parent_folder, now=None):
    """Creates and returns parent_folder/session_<YYYY_MM_DD_HH_MM>_<idx>

    idx is the lowest non-negative integer giving a folder that
    does not exist yet.
    """
    if now is None:
        now = datetime.datetime.now()
    base_name = SESSION_PREFIX + now.strftime("%Y_%m_%d_%H_%M")
    idx = 0
    while parent_folder.joinpath(f"{base_name}_{idx}").exists():
        idx += 1
    folder = parent_folder.joinpath(f"{base_name}_{idx}")
    folder.mkdir(parents=True)
    return folder


def write_session_metadata(folder_path, processor, session_info):
    """Adds the processor description under its name in metadata.json,
        together with the capture settings of the session.
        Entries already in the file are kept.
    """
    file_path = folder_path.joinpath(METADATA_FILE)
    if file_path.exists():
        with open(file_path) as f:
            metadata = json.load(f)
    else:
        metadata = {}

    metadata["samplerate"] = session_info.samplerate
    metadata["block size"] = session_info.block_size
    metadata["processed blocks"] = processor.processed_blocks
    metadata[processor.name] = processor.metadata
    with open(file_path, "w") as f:
        json.dump(metadata, f, indent=4)
