from __future__ import annotations
import os


def _flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


DETECT_CYCLES = _flag("STEPGRAPH_DETECT_CYCLES")
DEBUG = _flag("STEPGRAPH_DEBUG")
