#!/usr/bin/env python3
"""
The log module of cpuidb. It's small on purpose: the database scripts only
care about telling the user what happens, not about configuring handlers per
module.

It has two modes. The normal mode looks like this:

:: Informational messages, issued with the info function.
// Verbose messages, issued with the debug function.
!! Warnings, e.g. a dump that couldn't be parsed.
## Errors, the run is most likely over.

While the extensive mode (used for log files) looks like this:

[2021.06.02 21:56:29] [DEBUG   //] Found 1337 CPUID dumps.
[2021.06.02 22:11:09] [INFO    ::] Parsing CPUID dumps...
[2021.06.02 22:11:10] [WARNING !!] Failed to parse source/B_CPUID.txt: ...
[2021.06.02 22:11:57] [ERROR   ##] Can't write db.py: Permission denied
"""
import atexit
import datetime
import enum
import sys

from PIL.ImageColor import getrgb


COLOR_START = "\033[38;2;{0};{1};{2}m"
RESET = "\033[0m"

CYAN = COLOR_START.format(*getrgb("#00ffff"))
VIOLET = COLOR_START.format(*getrgb("#5f00ff"))
YELLOW = COLOR_START.format(*getrgb("#ffd700"))
ORANGE = COLOR_START.format(*getrgb("#ff4b00"))


class Mode(enum.Enum):
    """
    The mode the formatter is in, see the module notes. NONE is the normal
    mode without colors.
    """
    NONE = 1
    NORMAL = 2
    EXTENSIVE = 3


class Level(enum.Enum):
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4


DEBUG = Level.DEBUG
INFO = Level.INFO
WARNING = Level.WARNING
ERROR = Level.ERROR

# level -> (marker, color, name in extensive mode)
MARKERS = {
    DEBUG: ("//", VIOLET, "DEBUG  "),
    INFO: ("::", CYAN, "INFO   "),
    WARNING: ("!!", YELLOW, "WARNING"),
    ERROR: ("##", ORANGE, "ERROR  "),
}


mode = Mode.NORMAL
filterlevel = INFO
logfile = None
progress = None


def get_formatted_datetime() -> str:
    """Returns the current time as YYYY.mm.dd HH:MM:SS."""
    return datetime.datetime.now().strftime("%Y.%m.%d %H:%M:%S")


def format_level(level: Level) -> str:
    """Converts the given level into the prefix of a log entry."""
    marker, color, name = MARKERS[level]
    if mode == Mode.NONE:
        return marker
    elif mode == Mode.NORMAL:
        return f"{color}{marker}{RESET}"
    return f"[{get_formatted_datetime()}] [{name} {marker}]"


def close_if_needed():
    """Closes the logfile if needed."""
    global logfile
    if logfile is not None:
        logfile.close()
        logfile = None


def _reset(new_mode: Mode, new_filterlevel: Level):
    global mode
    global filterlevel

    close_if_needed()
    mode = new_mode
    filterlevel = new_filterlevel


def init():
    """
    Initializes logging with colors at the INFO level, so DEBUG messages are
    dropped. This is also the state before any init function is called.
    """
    _reset(Mode.NORMAL, INFO)


def init_debug():
    """Initializes logging with colors at the DEBUG level."""
    _reset(Mode.NORMAL, DEBUG)


def init_colorless():
    """Initializes logging at the INFO level, without colors."""
    _reset(Mode.NONE, INFO)


def init_file(file: str):
    """
    Initializes logging at the DEBUG level into the given file, in the
    extensive mode. The file is appended to, not truncated.
    """
    global logfile

    _reset(Mode.EXTENSIVE, DEBUG)
    logfile = open(file, "a")
    logfile.write(f"   >>> NEW LOG BEGINS AT {get_formatted_datetime()} <<<\n")


atexit.register(close_if_needed)


def log(message: str, level: Level):
    """
    Logs the message. WARNING and ERROR go to stderr, the rest to stdout. If
    `init_file` was used everything goes into the logfile instead, but ERRORs
    are still echoed to stderr, so a failed run never ends silently.

    Multi-line messages are indented below the prefix:

    :: Parsed 3 CPUs:
       GenuineIntel0000306A9_IvyBridge_CPUID
       AuthenticAMD0A20F10_K19_Vermeer_CPUID
    """
    message = str(message)
    if level.value < filterlevel.value:
        return

    prefix = format_level(level)
    # the color escape codes don't take up any space on the terminal
    if mode == Mode.NORMAL:
        indent = " " * len(MARKERS[level][0])
    else:
        indent = " " * len(prefix)

    lines = iter(message.split("\n"))
    entry = [f"{prefix} {next(lines)}"]
    for line in lines:
        entry.append(f"{indent} {line}")
    entry = "\n".join(entry)

    if logfile is not None:
        target = logfile
        if level == ERROR:
            print(f"{MARKERS[ERROR][0]} {message}", file=sys.stderr)
    elif level.value >= WARNING.value:
        target = sys.stderr
    else:
        target = sys.stdout

    if logfile is None and progress is not None:
        # the bar has to be gone before anything else appears on the terminal
        progress._delete_on_stdout()
        progress.last_print_len = 0

    print(entry, file=target)
    target.flush()

    if logfile is None and progress is not None:
        progress._redraw()


def debug(message: str):
    """Logs at the DEBUG level, hidden unless `init_debug` or `init_file`."""
    log(message, DEBUG)


def info(message: str):
    log(message, INFO)


def warning(message: str):
    """Logs at the WARNING level. Something was skipped, but the run goes on."""
    log(message, WARNING)


def error(message: str):
    """Logs at the ERROR level."""
    log(message, ERROR)


def _map_range(value: float, instart: float, instop: float, outstart: float,
        outstop: float) -> float:
    return outstart + (outstop - outstart) \
        * ((value - instart) / (instop - instart))


class Progress:
    """
    A small live progress bar. Log entries issued while it's active are
    printed above it.

    :: Parsing CPUID dumps...  96/665 [///——————————————————]
       ^^^^^^^^^^^^^^^^^^^^^^     ^^^
              message             end

    Call .finish() once done, otherwise logging stays routed through stdout.
    """
    WIDTH = 23

    def __init__(self, message: str, end: int):
        global progress

        self.message = message
        self.end = end
        self.current = 0
        self.last_print_len = 0

        progress = self

    def _delete_on_stdout(self):
        if self.last_print_len == 0 or logfile is not None:
            return
        sys.stdout.write("\b" * self.last_print_len)
        sys.stdout.write(" " * self.last_print_len)
        sys.stdout.write("\b" * self.last_print_len)
        sys.stdout.flush()

    def _redraw(self):
        self._delete_on_stdout()

        current = str(self.current).rjust(len(str(self.end)))
        fraction = f"{current}/{self.end}"

        if logfile is not None:
            # no bar in files, the fraction is enough
            print(f"{format_level(INFO)} {self.message} {fraction}",
                  file=logfile)
            return

        if self.current >= self.end:
            filled = self.WIDTH
        else:
            filled = int(_map_range(self.current, 0, self.end, 0, self.WIDTH))
        bar = f"[{'/' * filled}{'—' * (self.WIDTH - filled)}]"

        status = f"{format_level(INFO)} {self.message} {fraction} {bar}"
        sys.stdout.write(status)
        sys.stdout.flush()
        self.last_print_len = len(status)

    def stack(self):
        """Increases the progress bar by 1 and redraws it."""
        self.increase(1)

    def increase(self, amount: int):
        self.current += amount
        self._redraw()

    def is_done(self) -> bool:
        return self.current >= self.end

    def finish(self):
        """Finishes the progress bar and routes logging back to normal."""
        global progress

        progress = None
        if logfile is None and self.last_print_len:
            sys.stdout.write("\n")
            sys.stdout.flush()
        self.last_print_len = 0


# vim:textwidth=80:
