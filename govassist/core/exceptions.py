"""Custom exception hierarchy."""


class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class APIClientError(AppError):
    """Raised when an external API call fails."""
    pass


class APITimeoutError(APIClientError):
    """Raised when an external API call times out."""
    pass


class CacheError(AppError):
    """Raised when the response cache cannot be reached."""
    pass


class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass


class AIServiceError(AppError):
    """Raised when the AI service answers with an error payload."""
    pass


class ChatProcessingError(AppError):
    """Raised when a chat message could not be answered."""
    pass


class SessionNotFoundError(AppError):
    """Raised when a chat session is missing or owned by someone else."""
    pass


class ProcedureNotFoundError(AppError):
    """Raised when a procedure is not found."""
    pass
