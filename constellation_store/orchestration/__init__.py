"""Orchestration layer - write passes, graph assembly and the service facade."""

from constellation_store.orchestration.write_orchestrator import WriteOrchestrator, validate_tags
from constellation_store.orchestration.read_assembler import ReadAssembler
from constellation_store.orchestration.service import ConstellationService

__all__ = [
    "WriteOrchestrator",
    "validate_tags",
    "ReadAssembler",
    "ConstellationService",
]
