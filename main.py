# main.py
import curses
import sys

from app import App
from config import get_settings
from events import InputDecodeError, TerminalKeys, start_input_loop
from player import PlayerData
from savefile import SaveFileError, load_save_file
from ui import TUI, run
from utils import ask_bool, get_logger, setup_logging

logger = get_logger("totem")


def load_player(settings, ask=ask_bool):
    if ask("load save file? (y/n)"):
        return load_save_file(settings.save_path)
    return PlayerData()


def session(stdscr, app, settings):
    tui = TUI(stdscr)
    tui.start()
    channel = start_input_loop(TerminalKeys(), settings.tick_rate)
    run(tui, app, channel)


def main():
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)
    try:
        player = load_player(settings)
        app = App(player, settings.save_path)
        # curses.wrapper restores the terminal on every way out of session()
        curses.wrapper(session, app, settings)
    except (SaveFileError, InputDecodeError, curses.error) as e:
        logger.error("fatal: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    logger.info("bye (prays=%d)", app.player.prays)
    return 0


if __name__ == "__main__":
    sys.exit(main())
