# -*- coding: utf-8 -*-
"""
Minimal logger; timestamped lines on stdout/stderr.

Debug lines are off unless ``set_debug(True)`` is called or the environment
variable ``PNSIM_DEBUG`` is set to a non-zero value.
"""
import os, sys, time

_DEBUG = os.environ.get("PNSIM_DEBUG", "0") not in ("", "0")


def set_debug(flag: bool) -> None:
    global _DEBUG
    _DEBUG = bool(flag)


def debug_enabled() -> bool:
    return _DEBUG


def _stamp() -> str:
    return time.strftime('%H:%M:%S')

def debug(msg: str):
    if _DEBUG:
        print(f"[{_stamp()}] DEBUG: {msg}", file=sys.stderr)

def info(msg: str):  print(f"[{_stamp()}] {msg}", file=sys.stdout)
def warn(msg: str):  print(f"[{_stamp()}] WARNING: {msg}", file=sys.stderr)
def error(msg: str): print(f"[{_stamp()}] ERROR: {msg}", file=sys.stderr)
