"""Exception hierarchy shared by HeartSpace services.

Every error carries a short user-facing ``title`` and the HTTP ``status``
the web layer answers with. The message passed to the constructor becomes
the notice's ``detail``.
"""


class HeartSpaceError(Exception):
    """Base exception for HeartSpace"""
    title = "Something went wrong"
    status = 500


class ValidationError(HeartSpaceError):
    """User-correctable input problem"""
    title = "Please check your input"
    status = 400


class EmptyMessageError(ValidationError):
    """Raised when a message or post has no content"""
    title = "Please write something"


class AuthenticationError(HeartSpaceError):
    """Raised for bad credentials or a missing/expired token"""
    title = "Please sign in"
    status = 401


class PermissionDeniedError(HeartSpaceError):
    """Raised when a user touches a record they do not own"""
    title = "Not allowed"
    status = 403


class NotFoundError(HeartSpaceError):
    """Raised when a record does not exist"""
    title = "Not found"
    status = 404


class ConflictError(HeartSpaceError):
    """Raised when a write collides with existing state"""
    title = "Already exists"
    status = 409


class CollaboratorError(HeartSpaceError):
    """Raised when a backing store or media service fails"""
    title = "Service unavailable"
    status = 502


class StorageError(CollaboratorError):
    """Raised when the content store fails"""
    title = "Storage error"


class MediaError(CollaboratorError):
    """Raised when the media store fails"""
    title = "Upload failed"


class MediaTooLargeError(MediaError):
    """Raised before upload when a blob exceeds the size ceiling"""
    title = "File too large"
    status = 413
