"""Domain models shared across the database, API and service layers."""

from .enums import (
    EngagementType,
    EnquiryPriority,
    EnquiryStatus,
    ImportStatus,
    LayerType,
    MessageType,
    Permission,
    PinCategory,
    ProjectRole,
    QueryStatus,
    ShapeType,
    StakeholderCategory,
    StakeholderType,
    SubscriberSource,
    SystemRole,
)
from .timestamps import UtcDatetime, as_utc, utc_now

__all__ = [
    "EngagementType",
    "EnquiryPriority",
    "EnquiryStatus",
    "ImportStatus",
    "LayerType",
    "MessageType",
    "Permission",
    "PinCategory",
    "ProjectRole",
    "QueryStatus",
    "ShapeType",
    "StakeholderCategory",
    "StakeholderType",
    "SubscriberSource",
    "SystemRole",
    "UtcDatetime",
    "as_utc",
    "utc_now",
]
