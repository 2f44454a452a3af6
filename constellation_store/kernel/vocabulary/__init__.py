"""
Controlled vocabulary resolution.
"""

from constellation_store.kernel.vocabulary.term_resolver import TermResolver

__all__ = ["TermResolver"]
