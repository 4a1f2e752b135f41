"""
Open311 Sync - Temporal Utilities

Timestamp parsing for source records.
"""

from src.shared.temporal.parsers import parse_rfc3339

__all__ = ["parse_rfc3339"]
