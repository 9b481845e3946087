from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sandbox_sync.anonymization.models import ColumnRule

RowTransform = Callable[[dict[str, Any]], dict[str, Any]]


@dataclass(frozen=True)
class TablePolicy:
    """Whether a table is exported and how its rows are scrubbed."""

    include: bool
    rules: tuple[ColumnRule, ...] = ()
    transform: RowTransform | None = None
