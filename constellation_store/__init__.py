"""
Constellation Store

Versioned persistence engine for archival-identity constellations.
"""

__version__ = "0.1.0"
