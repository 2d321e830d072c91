"""
Result Pattern Implementation
Service-level outcome of an import step: the value on success, a message and
machine-readable code on failure
"""

from typing import TypeVar, Generic, Optional, Any, Dict
from dataclasses import dataclass

T = TypeVar('T')


@dataclass
class Result(Generic[T]):
    """
    Success or failure of a service call.

    Row-level problems never produce a failure Result; they are reported in
    the returned data. Failures are reserved for calls that could not run at
    all (no headers, a broken row source).

    Examples:
        result = service.auto_map(headers)
        if result.is_failure:
            print(result.error_code, result.error)
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def success(cls, data: T, metadata: Optional[Dict[str, Any]] = None) -> 'Result[T]':
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def failure(cls,
                error: str,
                code: Optional[str] = None,
                metadata: Optional[Dict[str, Any]] = None) -> 'Result[T]':
        """
        Create a failure result.

        Args:
            error: Human readable description
            code: Error code such as NO_HEADERS or IMPORT_ERROR
            metadata: Optional context about the failure
        """
        return cls(success=False, error=error, error_code=code, metadata=metadata)

    @property
    def is_success(self) -> bool:
        return self.success

    @property
    def is_failure(self) -> bool:
        return not self.success

    def unwrap(self) -> T:
        """
        Get the data from a successful result.

        Raises:
            ValueError: If called on a failure result
        """
        if self.is_failure:
            raise ValueError(f"Cannot unwrap a failure result: {self.error}")
        return self.data

    def unwrap_or(self, default: T) -> T:
        return self.data if self.is_success else default

    def __bool__(self) -> bool:
        return self.is_success

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.success(data={self.data!r})"
        return f"Result.failure(error={self.error!r}, code={self.error_code!r})"
