"""User and workspace model definitions."""
from typing import Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    """Current user as returned by the Clockify API."""

    id: str
    name: str = ""
    email: str = ""
    active_workspace: Optional[str] = Field(default=None, alias="activeWorkspace")
    default_workspace: Optional[str] = Field(default=None, alias="defaultWorkspace")

    model_config = {"populate_by_name": True}

    @property
    def preferred_workspace(self) -> Optional[str]:
        return self.active_workspace or self.default_workspace


class Workspace(BaseModel):
    """Workspace summary."""

    id: str
    name: str
