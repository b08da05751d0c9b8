"""Custom Exceptions for the TransVi application."""

class TransViError(Exception):
    """Base class for exceptions in this module."""
    pass

class ConfigurationError(TransViError):
    """Exception raised for invalid flags or configuration files."""
    pass

class ExternalProcessError(TransViError):
    """Exception raised when an external program fails to launch or exits non-zero."""
    pass

class AudioSplitError(ExternalProcessError):
    """Exception raised when ffmpeg fails to split the audio into segments."""
    pass

class TranscriptionError(ExternalProcessError):
    """Exception raised when the transcriber fails for a single segment."""
    pass

class FileSystemError(TransViError):
    """Exception raised for file system related errors (permissions, not found etc)."""
    pass

class FormattingError(TransViError):
    """Exception raised for errors during subtitle formatting."""
    pass

class SubtitleParseError(TransViError):
    """Exception raised for a malformed subtitle block or timecode."""
    pass

class MergeError(TransViError):
    """Exception raised when subtitle fragments cannot be merged or written."""
    pass

class WorkerPoolError(TransViError):
    """Exception raised when one or more worker tasks failed."""

    def __init__(self, failures):
        self.failures = list(failures)
        super().__init__(f"{len(self.failures)} segment task(s) failed")
