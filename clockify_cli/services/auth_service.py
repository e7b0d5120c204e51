"""Authentication service - API key storage and workspace selection."""
import logging
from typing import Optional

from pydantic import BaseModel, Field

from clockify_cli.config import ConfigStore
from clockify_cli.errors import NoWorkspaceConfigured, NotAuthenticated
from clockify_cli.models.user import User, Workspace


logger = logging.getLogger(__name__)


class Session(BaseModel):
    """Credentials a timer command needs before talking to the API."""

    api_key: str
    workspace_id: str


class AuthStatus(BaseModel):
    """What ``auth status`` reports."""

    authenticated: bool
    user: Optional[User] = None
    workspace_id: Optional[str] = None
    workspaces: list[Workspace] = Field(default_factory=list)


class AuthService:
    """Service for handling API key authentication."""

    def __init__(self, store: ConfigStore):
        """Initialize service with the persisted config store."""
        self.store = store

    def require_session(self) -> Session:
        """
        Check command preconditions.

        Returns:
            Session with API key and workspace id

        Raises:
            NotAuthenticated: If no API key is stored or provided
            NoWorkspaceConfigured: If no workspace id is stored
        """
        if not self.store.has_api_key():
            raise NotAuthenticated()

        workspace_id = self.store.workspace_id
        if not workspace_id:
            raise NoWorkspaceConfigured()

        return Session(api_key=self.store.api_key, workspace_id=workspace_id)

    async def login(
        self,
        client,
        api_key: str,
        workspace_id: Optional[str] = None,
    ) -> User:
        """
        Validate and store an API key.

        Args:
            client: Clockify API client built with ``api_key``
            api_key: Key to store
            workspace_id: Workspace to use; defaults to the user's active workspace

        Returns:
            The authenticated user

        Raises:
            TransportError: If the key is rejected
        """
        user = await client.get_current_user()

        self.store.set("api_key", api_key)
        workspace = workspace_id or user.preferred_workspace
        if workspace:
            self.store.set("workspace_id", workspace)
        logger.debug("Logged in as %s, workspace %s", user.id, workspace)

        return user

    async def status(self, client=None) -> AuthStatus:
        """
        Report login state.

        Args:
            client: Optional API client; when given, the user and workspaces are fetched

        Returns:
            AuthStatus
        """
        if not self.store.has_api_key():
            return AuthStatus(authenticated=False)

        status = AuthStatus(authenticated=True, workspace_id=self.store.workspace_id)
        if client is not None:
            status.user = await client.get_current_user()
            status.workspaces = await client.get_workspaces()
        return status

    def logout(self) -> None:
        """Forget the stored API key."""
        self.store.unset("api_key")
