import sys
import time

GREEN = "\033[92m"
ORANGE = "\033[38;5;208m"
RED = "\033[91m"
RESET = "\033[0m"


def _use_color():
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _emit(message, color=None):
    stamp = time.strftime("%Y/%m/%d %H:%M:%S")
    if color and _use_color():
        message = f"{color}{message}{RESET}"
    print(f"{stamp} {message}", flush=True)


def info(message):
    _emit(message)


def success(message):
    _emit(message, GREEN)


def warn(message):
    _emit(message, ORANGE)


def error(message):
    _emit(message, RED)
