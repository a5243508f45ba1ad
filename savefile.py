# savefile.py
import json

from player import PlayerData
from utils import get_logger, safe_write_json

logger = get_logger(__name__)

DEFAULT_SAVE_PATH = "player_data.json"


class SaveFileError(Exception):
    def __init__(self, path, cause):
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause}")


class SaveFileIOError(SaveFileError):
    pass


class SaveFileFormatError(SaveFileError):
    pass


def load_save_file(path=DEFAULT_SAVE_PATH):
    # no fallback record here, callers decide what a missing file means
    try:
        with open(path, "r", encoding="utf-8") as f:
            contents = f.read()
    except OSError as e:
        raise SaveFileIOError(path, e) from e
    except UnicodeDecodeError as e:
        raise SaveFileFormatError(path, e) from e
    try:
        player = PlayerData.from_dict(json.loads(contents))
    except ValueError as e:
        # json.JSONDecodeError is a ValueError too
        raise SaveFileFormatError(path, e) from e
    logger.info("loaded %s (name=%r, prays=%d)", path, player.name, player.prays)
    return player


def write_save_file(path, player):
    try:
        safe_write_json(path, player.to_dict())
    except (TypeError, ValueError) as e:
        raise SaveFileFormatError(path, e) from e
    except OSError as e:
        raise SaveFileIOError(path, e) from e
    logger.info("saved %s (prays=%d)", path, player.prays)
    return path
