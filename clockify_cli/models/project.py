"""Project model definitions."""
from typing import Optional

from pydantic import BaseModel, Field


DEFAULT_PROJECT_COLOR = "#4CAF50"


class Project(BaseModel):
    """Project as returned by the Clockify API."""

    id: str
    name: str
    billable: bool = False
    color: Optional[str] = None
    archived: bool = False

    model_config = {"populate_by_name": True}


class ProjectRequest(BaseModel):
    """Project creation model."""

    name: str
    is_public: bool = Field(default=True, alias="isPublic")
    billable: bool = False
    color: str = DEFAULT_PROJECT_COLOR

    model_config = {"populate_by_name": True}

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
