"""Custom exceptions for the AKS manager."""


class AKSManagerError(Exception):
    """Base exception for all AKS manager errors."""

    def __init__(self, message: str, details: str = None):
        """Initialize the exception.

        Args:
            message: Main error message
            details: Additional details or suggestions
        """
        self.message = message
        self.details = details
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the complete error message.

        Returns:
            Formatted error message with details
        """
        if self.details:
            return f"{self.message}\n\nDetails: {self.details}"
        return self.message


class ParseError(AKSManagerError):
    """Exception raised when command output is not valid JSON."""

    pass


class QueryFailed(AKSManagerError):
    """Exception raised when an Azure control-plane call fails."""

    pass


class InvalidTransition(AKSManagerError):
    """Exception raised when a start/stop request is not allowed in the current state."""

    pass


class AlreadyInState(AKSManagerError):
    """Exception raised when the cluster is already in the requested state."""

    pass


class MissingField(AKSManagerError):
    """Exception raised when an expected field is absent from Azure data."""

    pass


class KubectlError(AKSManagerError):
    """Exception raised for kubectl execution errors."""

    pass


class ValidationError(AKSManagerError):
    """Exception raised for validation errors."""

    pass


class ConfigurationError(AKSManagerError):
    """Exception raised for configuration errors."""

    pass
