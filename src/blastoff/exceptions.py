"""Custom exceptions for blastoff."""


class BlastoffError(Exception):
    """Base exception for all blastoff errors."""

    pass


class ConfigurationError(BlastoffError):
    """Raised when configuration is invalid or missing."""

    pass


class CatalogError(BlastoffError):
    """Raised when the reference yields no usable sequences."""

    pass


class InsufficientLengthError(BlastoffError):
    """Raised when a sequence is too short for the requested separation.

    Recovered locally: the sampler skips the sequence for that level.
    """

    def __init__(self, message="", name=None, length=None, separation=None):
        super().__init__(message)
        self.name = name
        self.length = length
        self.separation = separation


class MalformedRecordError(BlastoffError):
    """Raised when an aligner output record cannot be parsed."""

    def __init__(self, message="", record=None):
        super().__init__(message)
        self.record = record


class ExternalToolError(BlastoffError):
    """Raised when an external tool execution fails."""

    def __init__(self, message="", command=None, returncode=None, stderr=None):
        """Initialize ExternalToolError with optional command details.

        Args:
            message: Error message
            command: Command that was executed (list of strings)
            returncode: Exit code from the command
            stderr: Standard error output from the command
        """
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class PipelineError(BlastoffError):
    """Raised when one or more separation levels could not be evaluated."""

    pass
