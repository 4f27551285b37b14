from fastapi import HTTPException, status


class ValidationError(ValueError):
    """Bad input from the caller. Reported as 422, never retried."""


class NotFoundError(LookupError):

    default_message = "Not found"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConversationNotFound(NotFoundError):

    default_message = "You have no conversation with this person"


class UserNotFound(NotFoundError):

    default_message = "User not found"


class PostNotFound(NotFoundError):

    default_message = "Post not found"


class CommentNotFound(NotFoundError):

    default_message = "Comment not found"


class PermissionDenied(PermissionError):

    def __init__(self, message: str = "Unauthorized action") -> None:
        self.message = message
        super().__init__(message)


def to_http_exception(exc: Exception) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    if isinstance(exc, PermissionDenied):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=exc.message)
    raise exc
