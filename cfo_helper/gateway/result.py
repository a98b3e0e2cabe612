"""Gateway call result."""
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class GatewayResult(Generic[T]):
    """Result of a gateway operation."""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "GatewayResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: Exception | str) -> "GatewayResult":
        return cls(success=False, error=str(error))
