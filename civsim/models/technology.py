"""Technology data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from civsim.models import TechBranch


@dataclass
class Technology:
    """Represents a technology that can be researched once its branch is high enough."""

    name: str
    branch: TechBranch
    required_level: int  # Branch level needed to unlock
    cost: int  # Money, paid by the caller
    description: str
    researched: bool = False

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"{self.name} ({self.branch.display_name} {self.required_level})"
