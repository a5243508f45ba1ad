# player.py
from dataclasses import dataclass

from utils import get_logger

logger = get_logger(__name__)

DEFAULT_NAME = "Player"
MAX_PRAYS = 2**32 - 1  # u32, same bound as older saves


@dataclass
class PlayerData:
    name: str = DEFAULT_NAME
    prays: int = 0

    def pray(self):
        # saturate instead of wrapping
        if self.prays >= MAX_PRAYS:
            logger.warning("pray counter already at %d, ignoring", MAX_PRAYS)
            return False
        self.prays += 1
        return True

    def to_dict(self):
        return {"name": self.name, "prays": self.prays}

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object")
        name = data.get("name")
        prays = data.get("prays")
        if not isinstance(name, str):
            raise ValueError("'name' must be a string")
        # bool is an int subclass
        if isinstance(prays, bool) or not isinstance(prays, int):
            raise ValueError("'prays' must be an integer")
        if not 0 <= prays <= MAX_PRAYS:
            raise ValueError(f"'prays' out of range: {prays}")
        return cls(name=name, prays=prays)
