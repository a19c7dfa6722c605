class ContentError(Exception):
    """Base class for failures a handler reports back to the caller."""

    status_code = 400

    def __init__(self, message, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(ContentError):
    status_code = 404


class ConflictError(ContentError):
    status_code = 409


class LimitReachedError(ContentError):
    status_code = 400


class UploadError(ContentError):
    status_code = 400
