# utils.py
import os
import json
import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class NotABoolError(ValueError):
    pass


def setup_logging(level="INFO", log_file=None):
    # the terminal belongs to curses while the app runs, so log to a file
    handlers = None
    if log_file:
        handlers = [logging.FileHandler(log_file, encoding="utf-8")]
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def get_logger(name):
    return logging.getLogger(name)


def safe_write_json(path, data):
    tmp = path + ".tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    os.replace(tmp, path)


def parse_bool(text):
    res = text.strip().lower()
    if res in ("y", "yes"):
        return True
    if res in ("n", "no"):
        return False
    raise NotABoolError(text)


def ask_bool(prompt, input_fn=input, print_fn=print):
    """Ask a y/n question until a usable answer comes back. EOF counts as no."""
    while True:
        print_fn(prompt)
        try:
            answer = input_fn()
        except EOFError:
            return False
        try:
            return parse_bool(answer)
        except NotABoolError:
            print_fn("please answer 'y' or 'n'")
