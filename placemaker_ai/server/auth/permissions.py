"""
Role and permission tables.

System roles apply across the platform; project roles come from a
``ProjectAccess`` grant and only apply to that project. Super admins hold
every permission and are treated as project admins everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from placemaker_ai.core.database.entities import User
from placemaker_ai.core.database.repositories import UserRepository
from placemaker_ai.core.models.domain import Permission, ProjectRole, SystemRole

ALL_PERMISSIONS: FrozenSet[Permission] = frozenset(Permission)

SYSTEM_ROLE_PERMISSIONS: Dict[SystemRole, FrozenSet[Permission]] = {
    SystemRole.SUPER_ADMIN: ALL_PERMISSIONS,
    SystemRole.USER: frozenset(),
}

PROJECT_ROLE_PERMISSIONS: Dict[ProjectRole, FrozenSet[Permission]] = {
    ProjectRole.ADMIN: frozenset(
        {
            Permission.projects_read,
            Permission.projects_update,
            Permission.users_invite,
            Permission.analytics_view,
            Permission.feedback_manage,
            Permission.stakeholders_manage,
            Permission.settings_manage,
        }
    ),
    ProjectRole.CLIENT: frozenset({Permission.projects_read, Permission.analytics_view}),
}


def _system_role(user: User) -> SystemRole:
    try:
        return SystemRole(user.system_role)
    except ValueError:
        return SystemRole.USER


def is_super_admin(user: User) -> bool:
    return _system_role(user) is SystemRole.SUPER_ADMIN


def has_system_permission(user: User, permission: Permission) -> bool:
    return permission in SYSTEM_ROLE_PERMISSIONS[_system_role(user)]


def has_project_permission(role: Optional[ProjectRole], permission: Permission) -> bool:
    if role is None:
        return False
    return permission in PROJECT_ROLE_PERMISSIONS[role]


@dataclass(frozen=True)
class ProjectAccessResult:
    """Outcome of a project access check."""

    can_access: bool
    role: Optional[ProjectRole] = None
    is_admin: bool = False

    def allows(self, permission: Permission) -> bool:
        return self.can_access and has_project_permission(self.role, permission)


async def can_access_project(session: AsyncSession, user: User, project_id: int) -> ProjectAccessResult:
    """Decide whether ``user`` may access a project and with which role.

    Args:
        session: Database session used to read the access grant
        user: The caller
        project_id: Project being accessed

    Returns:
        ProjectAccessResult; super admins always get the ADMIN role
    """
    if is_super_admin(user):
        return ProjectAccessResult(can_access=True, role=ProjectRole.ADMIN, is_admin=True)

    access = await UserRepository(session).get_access(user.id, project_id)
    if access is None:
        return ProjectAccessResult(can_access=False)
    role = ProjectRole(access.role)
    return ProjectAccessResult(can_access=True, role=role, is_admin=role is ProjectRole.ADMIN)
