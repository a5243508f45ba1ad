# ui.py
import curses
from curses.textpad import rectangle

from app import MenuItem
from utils import get_logger

logger = get_logger(__name__)

COPYRIGHT_TEXT = "(c) Copyright NotThatRqd 2023 All Rights Reserved"
MENU_TITLES = ["Home", "Pray", "Save", "Quit"]
HELP_TEXT = "Press 'p' to access pray, 'h' to go home, 'q' to quit, 's' to save"

ASCII_ART = [
r" _  __ ___ _____ ",
r"| |/ /| __|_   _|",
r"| ' < | _|  | |  ",
r"|_|\_\|___| |_|  ",
]

WHITE, YELLOW, GREEN, CYAN, MAGENTA, RED = range(1, 7)


class TUI:
    def __init__(self, stdscr):
        self.stdscr = stdscr

    def start(self):
        curses.raw()
        curses.noecho()
        try:
            curses.curs_set(0)
        except curses.error:
            pass  # some terminals cannot hide the cursor
        if curses.has_colors():
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(WHITE, curses.COLOR_WHITE, -1)
            curses.init_pair(YELLOW, curses.COLOR_YELLOW, -1)
            curses.init_pair(GREEN, curses.COLOR_GREEN, -1)
            curses.init_pair(CYAN, curses.COLOR_CYAN, -1)
            curses.init_pair(MAGENTA, curses.COLOR_MAGENTA, -1)
            curses.init_pair(RED, curses.COLOR_RED, -1)

    def _color(self, pair):
        return curses.color_pair(pair) if curses.has_colors() else 0

    def _put(self, y, x, text, attr=0):
        # ignore writes past the edge of a small window
        h, w = self.stdscr.getmaxyx()
        if y < 0 or y >= h or x >= w:
            return
        try:
            self.stdscr.addstr(y, max(0, x), text[:max(0, w - x - 1)], attr)
        except curses.error:
            pass

    def _center(self, y, text, w, attr=0):
        self._put(y, max(0, (w - len(text)) // 2), text, attr)

    def _box(self, top, bottom, w, title):
        if bottom - top < 2 or w < 6:
            return
        try:
            rectangle(self.stdscr, top, 2, bottom, w - 3)
        except curses.error:
            pass
        self._put(top, 4, f" {title} ", self._color(WHITE) | curses.A_BOLD)

    def draw_menu(self, view, w):
        self._box(2, 4, w, "Menu")
        x = 4
        for i, title in enumerate(MENU_TITLES):
            if i:
                self._put(3, x, "|", self._color(WHITE))
                x += 2
            selected = i == view.selection.value
            rest = self._color(YELLOW) if selected else self._color(WHITE)
            self._put(3, x, title[0], self._color(YELLOW) | curses.A_UNDERLINE)
            self._put(3, x + 1, title[1:], rest | (curses.A_BOLD if selected else 0))
            x += len(title) + 1

    def draw_home(self, view, top, w):
        lines = ["", "Welcome,", view.name, "", "to", ""]
        y = top
        for line in lines:
            self._center(y, line, w)
            y += 1
        for line in ASCII_ART:
            self._center(y, line, w, self._color(CYAN))
            y += 1
        self._center(y, "Totem of Ket", w, self._color(CYAN) | curses.A_BOLD)
        self._center(y + 2, HELP_TEXT, w)

    def draw_pray(self, view, top, w):
        self._center(top, "Press [space bar] to pray to the totem", w, self._color(MAGENTA))
        self._center(top + 2, f"You have prayed {view.prays} times", w)

    def draw_save(self, view, top, w):
        self._center(top, "Press [space bar] to save to file", w, self._color(YELLOW))

    def draw_status(self, view, y, w):
        if view.status:
            color = RED if view.status.startswith("Save failed") else GREEN
            self._center(y, view.status, w, self._color(color))

    def render(self, view):
        """Draw one frame. Never touches application state."""
        self.stdscr.erase()
        h, w = self.stdscr.getmaxyx()
        self.draw_menu(view, w)

        body_top, body_bottom = 5, max(6, h - 6)
        titles = {MenuItem.HOME: "Home", MenuItem.PRAY: "Pray", MenuItem.SAVE: "Save"}
        self._box(body_top, body_bottom, w, titles[view.selection])
        if view.selection == MenuItem.HOME:
            self.draw_home(view, body_top + 1, w)
        elif view.selection == MenuItem.PRAY:
            self.draw_pray(view, body_top + 2, w)
        else:
            self.draw_save(view, body_top + 2, w)
        self.draw_status(view, body_bottom - 1, w)

        self._box(h - 5, h - 3, w, "Copyright")
        self._center(h - 4, COPYRIGHT_TEXT, w, self._color(GREEN))
        self.stdscr.refresh()


def run(tui, app, channel):
    """Render, wait for exactly one event, apply it. Stops on quit."""
    while True:
        tui.render(app.view())
        if not app.handle(channel.recv()):
            break
    logger.info("main loop finished")
