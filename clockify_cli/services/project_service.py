"""Project service - project lookup and auto-creation."""
import logging
from typing import Iterable, Optional

from clockify_cli.errors import ProjectCreationFailed, TransportError
from clockify_cli.models.project import Project, ProjectRequest
from clockify_cli.utils.sanitize import sanitize_input


logger = logging.getLogger(__name__)


def match_project(projects: Iterable[Project], query: str) -> Optional[Project]:
    """
    Find a project by case-insensitive name substring or exact id.

    Args:
        projects: Projects in server order
        query: Name fragment or project id

    Returns:
        First matching project, or None

    Examples:
        "client" matches "Client Work"; "5f1e..." matches the project with that id.
    """
    needle = query.lower()
    for project in projects:
        if needle in project.name.lower() or project.id == query:
            return project
    return None


class ProjectService:
    """Service for resolving projects in a workspace."""

    def __init__(self, client):
        """Initialize service with a Clockify API client."""
        self.client = client

    async def find_project(self, workspace_id: str, query: str) -> Optional[Project]:
        """
        Look up a project without creating it.

        Args:
            workspace_id: Workspace ID
            query: Name fragment or project id

        Returns:
            Matching project, or None
        """
        projects = await self.client.get_projects(workspace_id)
        return match_project(projects, query)

    async def resolve_or_create(
        self,
        workspace_id: str,
        query: str,
        billable: bool,
    ) -> tuple[Project, bool]:
        """
        Look up a project, creating it when nothing matches.

        Args:
            workspace_id: Workspace ID
            query: Name fragment or project id; used as the new project's name
            billable: Billable flag for a newly created project

        Returns:
            Tuple of (project, created)

        Raises:
            ProjectCreationFailed: If the project had to be created and creation failed
        """
        project = await self.find_project(workspace_id, query)
        if project:
            return project, False

        name = sanitize_input(query)
        logger.debug("Creating project %r in workspace %s", name, workspace_id)
        try:
            project = await self.client.create_project(
                workspace_id,
                ProjectRequest(name=name, billable=billable),
            )
        except TransportError as e:
            raise ProjectCreationFailed(name, str(e))

        return project, True
