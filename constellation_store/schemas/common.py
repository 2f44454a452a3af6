"""
Common schema types shared by the ledger, the orchestrator and the service.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from constellation_store.kernel.models.kinds import ComponentKind
from constellation_store.kernel.models.version_history import VersionStatus
from constellation_store.schemas.constellation import Constellation


class Editor(BaseModel):
    """User and role a ledger entry is attributed to."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    role_id: int


class VersionInfo(BaseModel):
    """The (record id, version) stamp shared by every row of one pass."""

    model_config = ConfigDict(frozen=True)

    record_id: int
    version: int


class HistoryEntry(BaseModel):
    """One ledger entry."""

    model_config = ConfigDict(from_attributes=True)

    record_id: int
    version: int
    user_id: int
    role_id: int
    status: VersionStatus
    note: Optional[str] = None
    created_at: Optional[datetime] = None


class DeleteRejection(BaseModel):
    """A delete the pass refused because it would break an invariant."""

    kind: ComponentKind
    component_id: int
    reason: str


class DeleteOutcome(BaseModel):
    """Result of a single-component soft delete."""

    deleted: bool
    record_id: int
    version: Optional[int] = None
    rejection: Optional[DeleteRejection] = None


class WriteResult(BaseModel):
    """Result of one write pass."""

    constellation: Constellation
    record_id: int
    version: int
    rejections: List[DeleteRejection] = []

    @property
    def fully_applied(self) -> bool:
        return not self.rejections
