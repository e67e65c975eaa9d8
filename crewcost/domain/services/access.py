"""
Access checks shared by the project-scoped services.

Every core operation receives the acting user's id explicitly; these
helpers turn that id into a verified membership.
"""
from typing import Optional

from crewcost.models import Project, ProjectMember
from crewcost.domain.entities import MemberRole
from crewcost.domain.exceptions import (
    NotProjectMemberError,
    OwnerRequiredError,
    ProjectNotFoundError,
    UnauthorizedError,
)
from crewcost.infrastructure.repositories import ProjectRepository


def require_actor(actor_id: Optional[int]) -> int:
    """Fail with UnauthorizedError when no authenticated user is present."""
    if actor_id is None:
        raise UnauthorizedError()
    return actor_id


def require_member(
    projects: ProjectRepository,
    actor_id: Optional[int],
    project_id: int
) -> tuple[Project, ProjectMember]:
    """
    Load a project the actor belongs to.

    Raises:
        UnauthorizedError: No actor
        ProjectNotFoundError: Project does not exist
        NotProjectMemberError: Actor is not a member
    """
    actor_id = require_actor(actor_id)
    project = projects.get_by_id(project_id)
    if not project:
        raise ProjectNotFoundError(project_id)
    membership = projects.get_membership(project_id, actor_id)
    if not membership:
        raise NotProjectMemberError(project_id, actor_id)
    return project, membership


def require_owner(
    projects: ProjectRepository,
    actor_id: Optional[int],
    project_id: int,
    action: str
) -> Project:
    """Load a project the actor owns; action names the attempted operation."""
    project, membership = require_member(projects, actor_id, project_id)
    if membership.role != MemberRole.OWNER.value:
        raise OwnerRequiredError(project_id, action)
    return project
