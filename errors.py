"""Errors raised by the handlers and turned into JSON responses by app.py."""


class AppError(Exception):
    status_code = 500
    message = "Something went wrong"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class BadRequestError(AppError):
    status_code = 400
    message = "Bad request"


class AuthenticationError(AppError):
    status_code = 401
    message = "Unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    message = "Not found"


class ConflictError(AppError):
    status_code = 409
    message = "Conflict"
