"""blockflow exception hierarchy.

All exceptions can be imported from this package:
    from blockflow.exceptions import BlockflowError, ConfigError
"""

from __future__ import annotations

from blockflow.exceptions.base import BlockflowError
from blockflow.exceptions.config import ConfigError

__all__ = [
    "BlockflowError",
    "ConfigError",
]
