# loader.py
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from pydantic import ValidationError

from .model import Step
from .schemas import parse_task_document


@dataclass
class LoaderError(Exception):
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def load_step_map(path: str | Path) -> Dict[str, Step]:
    """
    Load the step map out of a JSON task/template document.

    The file holds either:
      - {"steps": {name: {...}, ...}, ...}   (task, resolution or template)
      - {name: {...}, ...}                   (bare step map)

    "steps": null gives an empty map; validation decides what that means.
    """
    p = Path(path).expanduser().resolve()
    if not p.exists():
        raise LoaderError(str(p), "file not found")

    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise LoaderError(str(p), f"invalid JSON: {e}") from e

    if data is None:
        return {}

    try:
        return parse_task_document(data)
    except ValidationError as e:
        raise LoaderError(str(p), f"not a step map: {e.error_count()} problem(s)\n{e}") from e
