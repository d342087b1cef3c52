"""
Module: queue.py
Description: Queue declaration models.

Mirrors the aws_sqs_queue declarations in terraform/queues.tf so the same
queues can be created through the SQS API where Terraform is not used
(local stacks, throwaway accounts).

Key Components:
- QueueConfig: One queue declaration with provider limits enforced
- declared_queues(): The input and output queue declarations

Dependencies: pydantic, typing
Author: SQS Reader Team
"""

import re
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sqs_reader.config.settings import Settings, get_settings

# Keep in sync with terraform/queues.tf
DEFAULT_DELAY_SECONDS = 90
DEFAULT_MAX_MESSAGE_SIZE = 2048
DEFAULT_MESSAGE_RETENTION_SECONDS = 86400
DEFAULT_RECEIVE_WAIT_TIME_SECONDS = 10


class QueueConfig(BaseModel):
    """
    Static configuration of one SQS queue.

    Attributes:
        name: Queue name
        delay_seconds: Initial invisibility delay applied to new messages
        max_message_size: Largest accepted message in bytes
        message_retention_seconds: How long unconsumed messages are kept
        receive_wait_time_seconds: Default long polling wait time
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Queue name")
    delay_seconds: int = Field(default=0, ge=0, le=900)
    max_message_size: int = Field(default=262144, ge=1024, le=262144)
    message_retention_seconds: int = Field(default=345600, ge=60, le=1209600)
    receive_wait_time_seconds: int = Field(default=0, ge=0, le=20)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate the queue name against SQS naming rules."""
        if not re.match(r'^[A-Za-z0-9_-]{1,80}(\.fifo)?$', v):
            raise ValueError(
                "name must be 1-80 letters, numbers, hyphens or underscores"
            )
        return v

    @property
    def fifo(self) -> bool:
        return self.name.endswith('.fifo')

    def to_attributes(self) -> Dict[str, str]:
        """Render as a CreateQueue/SetQueueAttributes attribute map."""
        attributes = {
            'DelaySeconds': str(self.delay_seconds),
            'MaximumMessageSize': str(self.max_message_size),
            'MessageRetentionPeriod': str(self.message_retention_seconds),
            'ReceiveMessageWaitTimeSeconds': str(self.receive_wait_time_seconds),
        }
        if self.fifo:
            attributes['FifoQueue'] = 'true'
        return attributes


def declared_queues(settings: Optional[Settings] = None) -> List[QueueConfig]:
    """
    Return the input and output queue declarations.

    Args:
        settings: Settings providing queue names (defaults to process settings)

    Returns:
        Input queue config followed by output queue config
    """
    settings = settings or get_settings()
    return [
        QueueConfig(
            name=name,
            delay_seconds=DEFAULT_DELAY_SECONDS,
            max_message_size=DEFAULT_MAX_MESSAGE_SIZE,
            message_retention_seconds=DEFAULT_MESSAGE_RETENTION_SECONDS,
            receive_wait_time_seconds=DEFAULT_RECEIVE_WAIT_TIME_SECONDS,
        )
        for name in (settings.input_queue_name, settings.output_queue_name)
    ]
