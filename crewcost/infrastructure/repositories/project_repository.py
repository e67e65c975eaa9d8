"""
Project Repository - Data access layer for projects and memberships.

Implements repository pattern for Project operations with:
- Membership lookup for tenant isolation
- Owner membership on creation
"""
from typing import List, Optional
from datetime import datetime
from sqlalchemy.orm import Session

from crewcost.models import Project, ProjectMember
from crewcost.domain.entities import MemberRole
from .base_repository import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """
    Repository for Project entities.

    A project is created together with its owner membership so the
    creator can always see it.
    """

    def __init__(self, session: Session):
        super().__init__(session, Project)

    def exists(self, **criteria) -> bool:
        """Check if a Project matching the criteria exists."""
        return self._exists(**criteria)

    def create(
        self,
        owner_id: int,
        name: str,
        currency: str,
        description: Optional[str] = None,
        budget_cents: Optional[int] = None
    ) -> Project:
        """
        Create a project and its owner membership.

        Returns:
            Created project (not yet committed)
        """
        project = Project(
            name=name,
            description=description,
            currency=currency,
            owner_id=owner_id,
            budget_cents=budget_cents,
        )
        project.members.append(ProjectMember(user_id=owner_id, role=MemberRole.OWNER.value))
        self.add(project)
        return project

    def get_for_user(self, user_id: int) -> List[Project]:
        """
        Get all projects a user belongs to, newest first.

        Args:
            user_id: Member user identifier
        """
        return self.session.query(Project).join(
            ProjectMember, ProjectMember.project_id == Project.id
        ).filter(
            ProjectMember.user_id == user_id
        ).order_by(Project.created_at.desc(), Project.id.desc()).all()

    def get_membership(self, project_id: int, user_id: int) -> Optional[ProjectMember]:
        """Membership row for (project, user), if any."""
        return self.session.query(ProjectMember).filter(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id
        ).first()

    def get_members(self, project_id: int) -> List[ProjectMember]:
        """All members of a project, in the order they joined."""
        return self.session.query(ProjectMember).filter(
            ProjectMember.project_id == project_id
        ).order_by(ProjectMember.joined_at, ProjectMember.id).all()

    def member_ids(self, project_id: int) -> set:
        rows = self.session.query(ProjectMember.user_id).filter(
            ProjectMember.project_id == project_id
        ).all()
        return {row[0] for row in rows}

    def add_member(self, project_id: int, user_id: int, role: MemberRole = MemberRole.MEMBER) -> ProjectMember:
        member = ProjectMember(project_id=project_id, user_id=user_id, role=role.value)
        self.add(member)
        return member

    def set_budget(self, project: Project, budget_cents: Optional[int]) -> Project:
        project.budget_cents = budget_cents
        project.updated_at = datetime.utcnow()
        return project
