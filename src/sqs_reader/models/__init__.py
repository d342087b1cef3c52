"""
Package: models
Description: Data models for queue messages and queue declarations.
"""

from sqs_reader.models.message import QueueMessage, SendResult
from sqs_reader.models.queue import QueueConfig, declared_queues

__all__ = [
    "QueueMessage",
    "SendResult",
    "QueueConfig",
    "declared_queues",
]
