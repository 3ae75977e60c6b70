import os
import logging
import threading
import multiprocessing
import config

logger = logging.getLogger('chunkgen')

LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARN': logging.WARNING,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
}

# scope -> (config flag, default) that has to be on for the scope to log
GATED_SCOPES = {
    'GEN': ('LOG_GENERATION', False),
    'OPTIONS': ('LOG_OPTION_FALLBACK', True),
}

GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
RESET = "\x1b[0m"


def scope_enabled(scope):
    flag = GATED_SCOPES.get(scope)
    if flag is None:
        return True
    return bool(getattr(config, flag[0], flag[1]))


def _tint(proc, thread):
    '''ANSI colour for the caller, None for the main thread of the main process'''
    if not getattr(config, "LOG_COLOR", True) or os.getenv("NO_COLOR") is not None:
        return None
    if proc != "MainProcess":
        return YELLOW
    if thread != "MainThread":
        return GREEN
    return None


def log(scope, msg, level="INFO"):
    """ Log msg under scope, tagged with the calling process and thread.

    GEN and OPTIONS lines are dropped unless their config flag is on.
    """
    lvl = LEVELS.get(level, logging.INFO)
    if not scope_enabled(scope) or not logger.isEnabledFor(lvl):
        return
    proc = multiprocessing.current_process().name
    thread = threading.current_thread().name
    text = f"[{level} pid{os.getpid()} proc{proc} thr{thread} {scope}] {msg}"
    tint = _tint(proc, thread)
    if tint is not None:
        text = f"{tint}{text}{RESET}"
    logger.log(lvl, text)
