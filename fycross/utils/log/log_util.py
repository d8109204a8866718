#
# Copyright 2024 fycross Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
Console output helpers.

Progress is printed to stdout with a short status prefix, errors go to
stderr. Debug lines are only shown once debug output has been enabled
with set_debug(), which the CLI does for --debug.
"""

import sys
import threading

_debug = False
_lock = threading.Lock()


def set_debug(enabled: bool):
    global _debug
    _debug = bool(enabled)


def is_debug() -> bool:
    return _debug


def _emit(message: str, stream=None):
    # parallel builds print from worker threads
    with _lock:
        print(message, file=stream or sys.stdout, flush=True)


def info(message: str):
    _emit(message)


def success(message: str):
    _emit(f"[✓] {message}")


def warning(message: str):
    _emit(f"[!] {message}")


def debug(message: str):
    if _debug:
        _emit(f"[debug] {message}")


def error(message: str):
    _emit(f"ERROR: {message}", stream=sys.stderr)
