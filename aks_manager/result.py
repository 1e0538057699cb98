"""Success-or-error result returned by cluster and table operations."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from aks_manager.exceptions import AKSManagerError

T = TypeVar("T")


class Result(BaseModel, Generic[T]):
    """Outcome of an operation: either a value or the error that prevented it."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    succeeded: bool
    result: T | None = None
    error: AKSManagerError | None = None

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        """Build a successful result."""
        return cls(succeeded=True, result=value)

    @classmethod
    def fail(cls, error: AKSManagerError) -> "Result[T]":
        """Build a failed result carrying the error."""
        return cls(succeeded=False, error=error)

    @property
    def failed(self) -> bool:
        return not self.succeeded

    @property
    def message(self) -> str:
        """Formatted error text, empty for successful results."""
        if self.error is None:
            return ""
        return self.error.format_message()

    def unwrap(self) -> T:
        """Return the value or raise the carried error.

        Raises:
            AKSManagerError: If the result is a failure
        """
        if self.failed:
            raise self.error
        return self.result
