"""Error hierarchy shared by the whole application."""


class LicaError(Exception):
    """Base class for every error the application raises on purpose."""

    default_message = "Application error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class ValidationError(LicaError):
    """Input did not satisfy a domain rule."""

    default_message = "Validation error"


class AccessDeniedError(LicaError):
    """The current user may not touch the requested resource."""

    default_message = "Access Denied"


class NotFoundError(LicaError):
    """The requested resource does not exist."""

    default_message = "Not Found"