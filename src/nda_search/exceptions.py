"""Exception hierarchy for nda-search."""


class NDASearchError(Exception):
    """Base exception for all nda-search errors."""

    exit_code: int = 1
    user_message: str = "An error occurred"

    def __init__(
        self,
        message: str | None = None,
        *,
        user_message: str | None = None,
    ) -> None:
        super().__init__(message or self.user_message)
        if user_message:
            self.user_message = user_message


# Service Errors
class ServiceError(NDASearchError):
    """Data dictionary service errors."""

    exit_code = 2
    user_message = "Data dictionary service error"


class ServiceConnectionError(ServiceError):
    """The service could not be reached."""

    exit_code = 3
    user_message = "Cannot reach the data dictionary service"


class ServiceStatusError(ServiceError):
    """The service answered with a non-success status."""

    exit_code = 4
    user_message = "The data dictionary service returned an error"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        user_message: str | None = None,
    ) -> None:
        super().__init__(message, user_message=user_message)
        self.status_code = status_code


class ServiceResponseError(ServiceError):
    """The service answered with a payload that could not be parsed."""

    exit_code = 5
    user_message = "Unexpected response from the data dictionary service"


class ElementNotFoundError(ServiceError):
    """No data element with the requested name exists."""

    exit_code = 6
    user_message = "Data element not found"

    def __init__(self, name: str, *, user_message: str | None = None) -> None:
        super().__init__(f"Data element not found: {name}", user_message=user_message)
        self.name = name


# History Errors
class HistoryError(NDASearchError):
    """Search history persistence errors."""

    exit_code = 10
    user_message = "Search history error"


# Config Errors
class ConfigError(NDASearchError):
    """Configuration errors."""

    exit_code = 20
    user_message = "Configuration error"


class ConfigValidationError(ConfigError):
    """Configuration validation failed."""

    exit_code = 22
    user_message = "Invalid configuration"


# Search Errors
class SearchError(NDASearchError):
    """Search-related errors."""

    exit_code = 30
    user_message = "Search error"


class DiscoveryError(SearchError):
    """Candidate data structures could not be listed."""

    exit_code = 31
    user_message = "Error fetching data structures"


class InvalidQueryError(SearchError):
    """The search query is empty or malformed."""

    exit_code = 32
    user_message = "Enter a full or partial data element name"


# Command Errors
class CommandError(NDASearchError):
    """Command execution errors."""

    exit_code = 40
    user_message = "Command error"


class InvalidArgumentError(CommandError):
    """Invalid argument provided."""

    exit_code = 42
    user_message = "Invalid argument"
