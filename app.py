# app.py
from dataclasses import dataclass
from enum import Enum

from events import Input, InputFailure, Tick
from savefile import DEFAULT_SAVE_PATH, SaveFileError, write_save_file
from utils import get_logger

logger = get_logger(__name__)


class MenuItem(Enum):
    HOME = 0
    PRAY = 1
    SAVE = 2


MENU_KEYS = {"h": MenuItem.HOME, "p": MenuItem.PRAY, "s": MenuItem.SAVE}


@dataclass(frozen=True)
class AppView:
    """Read-only snapshot handed to the renderer."""
    selection: MenuItem
    name: str
    prays: int
    status: str = ""


class App:
    def __init__(self, player, save_path=DEFAULT_SAVE_PATH):
        self.player = player
        self.save_path = save_path
        self.selection = MenuItem.HOME
        self.status = ""
        self.running = True

    def view(self):
        return AppView(self.selection, self.player.name, self.player.prays, self.status)

    def handle(self, event):
        """Apply one event. Returns False once the app has quit."""
        if not self.running:
            return False
        if isinstance(event, InputFailure):
            raise event.error
        if isinstance(event, Tick):
            return True
        if isinstance(event, Input):
            self.on_key(event.key)
        return self.running

    def on_key(self, key):
        if key == "q":
            logger.info("quit requested")
            self.running = False
        elif key in MENU_KEYS:
            self.selection = MENU_KEYS[key]
            self.status = ""
        elif key == " ":
            if self.selection == MenuItem.PRAY:
                if not self.player.pray():
                    self.status = "The totem cannot hear any more prayers"
            elif self.selection == MenuItem.SAVE:
                self.save()

    def save(self):
        try:
            path = write_save_file(self.save_path, self.player)
        except SaveFileError as e:
            logger.error("save failed: %s", e)
            self.status = f"Save failed: {e.cause}"
            return False
        self.status = f"Saved to {path}"
        return True
