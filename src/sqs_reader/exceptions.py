"""
SQS reader exceptions.
"""


class SQSReaderError(Exception):
    """Base exception for SQS reader errors."""

    pass


class ReaderConfigurationError(SQSReaderError):
    """Raised when the requested read cannot be carried out as configured."""

    pass


class QueueNotFoundError(SQSReaderError):
    """Raised when a queue name cannot be resolved to a URL."""

    def __init__(self, queue_name: str):
        super().__init__(f"Queue does not exist: {queue_name}")
        self.queue_name = queue_name


class QueueSizeUnavailableError(SQSReaderError):
    """Raised when ApproximateNumberOfMessages cannot be read."""

    pass


class MessageFormatError(SQSReaderError):
    """Raised when a received message lacks a required field."""

    pass
