"""Structured result envelope returned by services."""
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ServiceResult:
    """HTTP-style status plus a payload or message."""

    response: Any
    status: int

    def to_dict(self) -> dict[str, Any]:
        return {"response": self.response, "status": self.status}
