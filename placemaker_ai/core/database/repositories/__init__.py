"""
Repositories for data access beyond plain CRUD.

Modules:
- base: generic async repository and query helpers
- projects: project listing, users and project access grants
- stakeholders: stakeholder lookups and engagement auto-logging
- subscribers: mailing list upsert
- councils: councillor matching, import and statistics
"""

from .base import AsyncBaseRepository, QueryBuilder
from .councils import CouncilRepository
from .projects import ProjectRepository, UserRepository
from .stakeholders import StakeholderRepository
from .subscribers import SubscriberRepository

__all__ = [
    "AsyncBaseRepository",
    "CouncilRepository",
    "ProjectRepository",
    "QueryBuilder",
    "StakeholderRepository",
    "SubscriberRepository",
    "UserRepository",
]
