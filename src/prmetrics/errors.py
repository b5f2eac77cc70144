"""Custom exception types for the PR metrics dashboard."""


class ReportGeneratorError(Exception):
    """Base exception for all recoverable report generator errors."""


class ConfigurationError(ReportGeneratorError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(ReportGeneratorError):
    """Raised when GitHub credentials are unavailable or rejected."""


class ApiError(ReportGeneratorError):
    """Raised when a GitHub API request fails or returns an unexpected response."""
