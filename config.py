"""Settings for the totem.

Values come from the environment, with a `.env` file in the working
directory loaded once at import time.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    save_path: str = "player_data.json"
    tick_ms: int = 200
    log_level: str = "INFO"
    log_file: str = "totem.log"

    @property
    def tick_rate(self):
        return self.tick_ms / 1000.0


def load_settings():
    tick = os.getenv("TOTEM_TICK_MS", "200")
    try:
        tick_ms = max(1, int(tick))
    except ValueError:
        tick_ms = 200
    return Settings(
        save_path=os.getenv("TOTEM_SAVE_PATH", "player_data.json"),
        tick_ms=tick_ms,
        log_level=os.getenv("TOTEM_LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("TOTEM_LOG_FILE", "totem.log"),
    )


@lru_cache
def get_settings():
    return load_settings()
