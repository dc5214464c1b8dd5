class StudyDataError(Exception):
    """Raised when stored study data cannot be read or has the wrong shape."""


class UnknownCardError(LookupError):
    """Raised when a review targets a card the repository does not hold."""
