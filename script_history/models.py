"""
Script History Models.

A project snapshot is a plain filename -> content mapping. History entries
are backward patches: each one turns the snapshot after it into the
snapshot before it.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

ScriptText = Dict[str, str]


class FileAddedChange(BaseModel):
    """File did not exist before the entry; rolling back deletes it."""
    type: Literal["added"] = "added"
    filename: str
    value: str  # kept for audit only


class FileRemovedChange(BaseModel):
    """File was deleted by the entry; rolling back restores `value`."""
    type: Literal["removed"] = "removed"
    filename: str
    value: str


class FileEditedChange(BaseModel):
    """File content changed; `patch` turns the newer content into the older one."""
    type: Literal["edited"] = "edited"
    filename: str
    patch: Any


FileChange = Annotated[
    Union[FileAddedChange, FileRemovedChange, FileEditedChange],
    Field(discriminator="type"),
]


class HistoryEntry(BaseModel):
    """
    One logged transformation of a project.
    """
    model_config = ConfigDict(populate_by_name=True)

    timestamp: int  # epoch ms
    editor_version: str = Field(alias="editorVersion")
    changes: List[FileChange] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_filenames(self):
        seen = set()
        for change in self.changes:
            if change.filename in seen:
                raise ValueError(f"filename repeated within one entry: {change.filename}")
            seen.add(change.filename)
        return self


class HistoryFile(BaseModel):
    """Persisted history of a single project, oldest entry first."""
    entries: List[HistoryEntry] = Field(default_factory=list)


class CollapseHistoryOptions(BaseModel):
    interval: int  # ms
    min_time: Optional[int] = None
    max_time: Optional[int] = None
