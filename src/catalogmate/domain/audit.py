"""
Audit capability contract.

Entities that are tenant scoped and audit tracked expose these fields directly;
the persistence boundary stamps them through the helpers below.
"""

from datetime import datetime, timezone
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class AuditTracked(Protocol):
    """Tenant-scoped entity carrying creation and modification stamps"""

    tenant_id: str
    created_at: Optional[datetime]
    created_by: Optional[str]
    last_modified_at: Optional[datetime]
    last_modified_by: Optional[str]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def stamp_created(entity: AuditTracked, tenant_id: str, user_id: str, at: Optional[datetime] = None) -> None:
    """Stamp tenant, creation and modification fields on a new entity"""
    if not tenant_id:
        raise ValueError("tenant_id is required")
    moment = at or utc_now()
    entity.tenant_id = tenant_id
    entity.created_at = moment
    entity.created_by = user_id
    entity.last_modified_at = moment
    entity.last_modified_by = user_id


def stamp_modified(entity: AuditTracked, user_id: str, at: Optional[datetime] = None) -> None:
    """Stamp modification fields on an existing entity"""
    entity.last_modified_at = at or utc_now()
    entity.last_modified_by = user_id
