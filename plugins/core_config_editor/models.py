# plugins/core_config_editor/models.py

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .document import DocumentState


class OpenConfigRequest(BaseModel):
    project_id: UUID
    path: Optional[str] = Field(
        default=None,
        description="Config module path relative to the project root. Defaults to ADTOOL_CONFIG_FILE."
    )


class SetValueRequest(BaseModel):
    path: str = Field(..., min_length=1, description="Dotted key path, e.g. 'audio.volume' or 'levels.0.name'.")
    value: Any = Field(..., description="Any JSON value.")


class ConfigSnapshot(BaseModel):
    """What a client needs to render the editor."""
    project_id: UUID
    path: str
    export_identifier: str
    export_kind: str
    state: DocumentState
    value: Any
    can_undo: bool
    can_redo: bool
    cursor: int
    history_length: int
