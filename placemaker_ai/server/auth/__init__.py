"""
Caller identity and permissions.

Authentication itself happens upstream; this package resolves the caller
from the identity header and decides what they may do on each project.
"""

from .deps import (
    CurrentUser,
    ProjectContext,
    ProjectDep,
    get_current_user,
    get_project_context,
    require_project_permission,
    require_super_admin,
)
from .permissions import (
    ProjectAccessResult,
    can_access_project,
    has_project_permission,
    has_system_permission,
    is_super_admin,
)

__all__ = [
    "CurrentUser",
    "ProjectAccessResult",
    "ProjectContext",
    "ProjectDep",
    "can_access_project",
    "get_current_user",
    "get_project_context",
    "has_project_permission",
    "has_system_permission",
    "is_super_admin",
    "require_project_permission",
    "require_super_admin",
]
