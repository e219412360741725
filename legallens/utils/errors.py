"""Error taxonomy for LegalLens.

Intake errors carry a message that is safe to show to the user as-is. Remote
failures are raised by the model wrappers and always recovered locally by the
classifier / chat layers, so they never reach the UI or the HTTP caller.
"""
from __future__ import annotations


class LegalLensError(Exception):
    """Base class for all application errors."""


class IntakeError(LegalLensError):
    """A file or pasted text was rejected before analysis started."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedFileType(IntakeError):
    pass


class FileTooLarge(IntakeError):
    status_code = 413


class EmptyDocument(IntakeError):
    pass


class ExtractionFailure(IntakeError):
    pass


class RemoteClassificationFailure(LegalLensError):
    pass


class RemoteChatFailure(LegalLensError):
    pass


class InvalidRequestAction(LegalLensError):
    def __init__(self, action):
        super().__init__(f"Invalid action: {action!r}")
        self.action = action


class NoActiveDocument(LegalLensError):
    pass
