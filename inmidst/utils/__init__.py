"""
Shared utilities for IN MIDST.

Common functionality used across contexts:
- Logger setup
- Timestamp parsing
- Text report formatting
"""

from inmidst.utils.timestamp import now, parse_timestamp

__all__ = ["now", "parse_timestamp"]
