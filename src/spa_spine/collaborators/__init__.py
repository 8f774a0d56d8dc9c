"""External collaborators: contracts and in-memory implementations."""

from spa_spine.collaborators.memory import InMemorySite, SiteDefinition
from spa_spine.collaborators.protocols import (
    ContentNode,
    ContentResolver,
    DomainMatch,
    DomainResolver,
    RedirectsService,
    RedirectTarget,
)

__all__ = [
    "ContentNode",
    "ContentResolver",
    "DomainMatch",
    "DomainResolver",
    "InMemorySite",
    "RedirectTarget",
    "RedirectsService",
    "SiteDefinition",
]
