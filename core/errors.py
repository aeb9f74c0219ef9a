class PortalError(Exception):
    """
    Base class for errors the HTTP layer knows how to render.

    4xx errors carry a message safe to show the caller; 5xx errors only
    expose ``public_message`` and keep the real cause for the logs.
    """

    status_code = 500
    public_message = "Internal server error"

    @property
    def detail(self) -> str:
        if self.status_code >= 500:
            return self.public_message
        return str(self) or self.public_message


class ValidationError(PortalError):
    status_code = 400
    public_message = "Invalid request"


class PayloadTooLargeError(ValidationError):
    status_code = 413
    public_message = "Payload too large"


class NotFoundError(PortalError):
    status_code = 404
    public_message = "Not found"


class StorageError(PortalError):
    public_message = "Storage failure"


class UpstreamError(PortalError):
    public_message = "Upstream storage failure"
