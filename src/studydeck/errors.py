"""Exception hierarchy for studydeck."""


class StudyDeckError(Exception):
    """Base class for all studydeck errors."""


class ValidationError(StudyDeckError, ValueError):
    """Input rejected before any computation or write."""


class InvalidQualityError(ValidationError):
    def __init__(self, quality):
        super().__init__(f"quality must be an integer from 0 to 5, got {quality!r}")
        self.quality = quality


class MalformedItemError(ValidationError):
    pass


class ItemNotFoundError(StudyDeckError, KeyError):
    def __init__(self, item_id: str):
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"No card with id {self.item_id!r}"


class ProtectedDeckError(StudyDeckError):
    pass


class SessionStateError(StudyDeckError):
    pass


class StoreError(StudyDeckError):
    """Persistence failed; raised by card stores."""
