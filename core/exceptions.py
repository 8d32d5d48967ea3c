"""Error taxonomy shared by services and the HTTP layer."""


class StudyBuddyError(Exception):
    """Base exception for all StudyBuddy errors."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class AuthError(StudyBuddyError):
    """The caller has no resolvable owner identity."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class ValidationError(StudyBuddyError):
    """A required field is empty or a value is outside its allowed range."""

    status_code = 422


class NotFoundError(StudyBuddyError):
    """Referenced record is absent or belongs to another owner."""

    status_code = 404


class FlashcardNotFoundError(NotFoundError):
    def __init__(self, flashcard_id: int | None = None) -> None:
        self.flashcard_id = flashcard_id
        if flashcard_id is not None:
            super().__init__(f"Flashcard with id {flashcard_id} not found")
        else:
            super().__init__("Flashcard not found")


class GenerationError(StudyBuddyError):
    """The text-generation provider failed or returned unusable content."""

    status_code = 502

    def __init__(self, message: str = "Failed to generate flashcards. Please try again.") -> None:
        super().__init__(message)


class ConflictError(StudyBuddyError):
    """A concurrent change invalidated the operation; nothing was written."""

    status_code = 409
