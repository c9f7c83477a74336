"""Common types used across azfunc-mcp."""

from __future__ import annotations

from types import EllipsisType
from typing import TypeAlias

# Marks keyword arguments the caller did not pass, so that None stays usable
NotSetT: TypeAlias = EllipsisType
NotSet: NotSetT = ...
