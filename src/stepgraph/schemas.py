from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .model import Step

# -------------------- Schemas --------------------

class StepPayload(BaseModel):
    # tasks carry many more fields (action, output, try_count, ...); only these matter here
    model_config = ConfigDict(extra="ignore")

    state: Optional[str] = None
    description: Optional[str] = None
    dependencies: Optional[List[str]] = None

    def to_step(self, name: str) -> Step:
        return Step(
            name=name,
            state=self.state or None,
            description=self.description or "",
            dependencies=tuple(self.dependencies or ()),
        )


class TaskPayload(BaseModel):
    """A task resolution or template: anything with a `steps` mapping."""
    model_config = ConfigDict(extra="ignore")

    steps: Optional[Dict[str, Optional[StepPayload]]] = Field(default=None)

    def step_map(self) -> Dict[str, Step]:
        out: Dict[str, Step] = {}
        for name, payload in (self.steps or {}).items():
            out[name] = (payload or StepPayload()).to_step(name)
        return out


def parse_task_document(data: Any) -> Dict[str, Step]:
    """
    Accept either {"steps": {...}} or a bare {name: step} mapping.

    Raises pydantic.ValidationError on shapes that fit neither.
    """
    if isinstance(data, dict) and "steps" in data:
        return TaskPayload.model_validate(data).step_map()
    return TaskPayload.model_validate({"steps": data}).step_map()
