"""Intake exceptions."""


class IntakeError(Exception):
    """Base exception for the document intake pipeline."""
    pass


class ArchiveError(IntakeError):
    """The uploaded archive cannot be read or holds no documents."""
    pass


class AssociationResolutionError(IntakeError):
    def __init__(self, name: str, detail: str = ""):
        message = f"Failed to create association: {name}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class StorageError(IntakeError):
    def __init__(self, path: str, detail: str):
        super().__init__(f"Storage upload failed for {path}: {detail}")
