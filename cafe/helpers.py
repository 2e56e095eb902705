import math
from typing import Callable

from termcolor import cprint, colored

Reader = Callable[[str], str]


def safe_int(value: str, minimum: int | None = None):
    """return int value or none if invalid / below minimum"""
    try:
        v = int(value.strip())
        if minimum is not None and v < minimum:
            return None
        return v
    except ValueError:
        return None


def safe_float(value: str, minimum: float | None = None):
    """return float value or none if invalid / below minimum"""
    try:
        v = float(value.strip().lstrip("$"))
        if not math.isfinite(v):
            return None
        if minimum is not None and v < minimum:
            return None
        return v
    except ValueError:
        return None


def as_bool(value) -> bool:
    """read a boolean column; drivers hand back bools, ints or 't'/'f' strings"""
    if isinstance(value, str):
        return value.strip().lower() in ("t", "true", "y", "yes", "1")
    return bool(value)


def read_int(read: Reader, prompt: str) -> int:
    """keep asking until an integer is given"""
    while True:
        v = safe_int(read(prompt))
        if v is not None:
            return v
        cprint("your input is invalid!", "red")


def read_choice(read: Reader) -> int:
    """read a numbered menu choice"""
    return read_int(read, colored("please make your choice: ", "blue"))


def print_options(title: str, options: dict[int, str]):
    """print a numbered menu"""
    cprint(title, "green", attrs=["bold"])
    cprint("-" * len(title), "green")
    for number, label in options.items():
        print(f"{number}. {label}")
