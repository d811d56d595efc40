"""Exceptions raised by the transcript pipeline."""

from pathlib import Path
from typing import Optional


class TranscriptError(RuntimeError):
    """Base class for pipeline failures. `hint` carries remediation text."""

    hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        if hint is not None:
            self.hint = hint


class ConfigurationError(TranscriptError, ValueError):
    """Required configuration is missing."""


class InvalidIdentifierError(TranscriptError, ValueError):
    """The input is neither a recognised YouTube URL nor a bare video ID."""

    hint = "Use a watch?v=, youtu.be/ or embed/ link, or the 11-character video ID."


class NoCaptionsAvailableError(TranscriptError):
    hint = "The video may not have captions. Try the audio transcription path (`yt2md run`)."


class MalformedSegmentError(TranscriptError):
    def __init__(self, index: int, segment):
        super().__init__(f"Invalid transcript segment at index {index}: {segment!r}")
        self.index = index


class FormattingError(TranscriptError):
    hint = "Try a shorter video or check your GOOGLE_API_KEY."


class EmptyResponseError(FormattingError):
    pass


class DegenerateResponseError(FormattingError):
    pass


class ContentTooLargeError(FormattingError):
    hint = (
        "The transcript exceeds the model's input limit. "
        "Try a shorter video (under ~2 hours) or process it in parts."
    )


class UpstreamServiceError(TranscriptError):
    def __init__(self, message: str, status_code: Optional[int] = None, hint: Optional[str] = None):
        super().__init__(message, hint=hint)
        self.status_code = status_code


class UnparseableResponseError(TranscriptError):
    def __init__(self, message: str, debug_path: Optional[Path] = None):
        super().__init__(message)
        self.debug_path = debug_path


class OperationTimeoutError(TranscriptError):
    hint = "Raise OPERATION_TIMEOUT or check the operation in the Cloud console."


class OperationCancelledError(TranscriptError):
    pass


class AuthenticationError(TranscriptError):
    hint = "Check GOOGLE_OAUTH2_CLIENT_ID / GOOGLE_OAUTH2_CLIENT_SECRET and finish the browser sign-in."


class DownloadError(TranscriptError):
    pass
