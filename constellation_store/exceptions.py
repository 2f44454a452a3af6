"""
Error taxonomy for the constellation store.

Every error names the offending component (kind and id where known) and a
reason, so callers can report exactly what failed.
"""

from typing import Optional


class ConstellationStoreError(Exception):
    """Base class for all store errors."""

    def __init__(
        self,
        reason: str,
        *,
        kind: Optional[str] = None,
        component_id: Optional[int] = None,
    ):
        self.reason = reason
        self.kind = kind
        self.component_id = component_id
        super().__init__(self._format())

    def _format(self) -> str:
        if self.kind is None:
            return self.reason
        if self.component_id is None:
            return f"{self.kind}: {self.reason}"
        return f"{self.kind} {self.component_id}: {self.reason}"


class ReferentialIntegrityError(ConstellationStoreError):
    """An id (term, record, owner or component) does not resolve."""


class InvariantViolation(ConstellationStoreError):
    """A write would break a record invariant, e.g. deleting the last name."""


class UnsupportedComponent(ConstellationStoreError):
    """Delete/undelete requested on a kind that does not support it."""


class BadOperationTag(ConstellationStoreError):
    """A graph node carries an operation tag outside insert/update/delete."""

    def __init__(self, tag: object, *, kind: Optional[str] = None, component_id: Optional[int] = None):
        self.tag = tag
        super().__init__(f"unrecognized operation tag {tag!r}", kind=kind, component_id=component_id)


class StorageFailure(ConstellationStoreError):
    """The relational store rejected or failed a call."""
