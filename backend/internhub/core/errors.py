"""Error taxonomy shared by services and routes.

Messages carried by these errors are returned to clients verbatim, so they
must never include exception text from the database or upstream services.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = 400
    default_message = "Bad request"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Not allowed"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class UpstreamError(AppError):
    status_code = 502
    default_message = "Upstream service failed"


class ServiceUnavailableError(AppError):
    status_code = 503
    default_message = "Service unavailable"
