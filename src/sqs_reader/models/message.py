"""
Module: message.py
Description: Message models for the SQS reader.

Wraps the raw dictionaries returned by ReceiveMessage and SendMessage in
validated models and renders them in the JSON line format written to
stdout.

Key Components:
- QueueMessage: A received message with its receipt handle and attributes
- SendResult: Identifiers returned after sending a message
- Compact, key-sorted JSON rendering

Dependencies: pydantic, json, typing
Author: SQS Reader Team
"""

import json
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from sqs_reader.exceptions import MessageFormatError


def _dump(value: Dict[str, Any]) -> str:
    return json.dumps(value, sort_keys=True, separators=(',', ':'), ensure_ascii=False)


class QueueMessage(BaseModel):
    """
    Message received from an SQS queue.

    Attributes:
        message_id: Unique identifier assigned by SQS
        receipt_handle: Handle required to delete the message
        body: Raw message body
        md5_of_body: MD5 digest of the body computed by SQS
        attributes: System attributes (SentTimestamp, ApproximateReceiveCount, ...)
        message_attributes: Custom attributes set by the sender
    """

    model_config = ConfigDict(frozen=True)

    message_id: str = Field(..., min_length=1, description="SQS message id")
    receipt_handle: str = Field(..., min_length=1, description="Receipt handle")
    body: str = Field(..., description="Message body")
    md5_of_body: str = Field(..., description="MD5 of the message body")
    attributes: Dict[str, str] = Field(default_factory=dict)
    message_attributes: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    @classmethod
    def from_sqs(cls, raw: Dict[str, Any]) -> "QueueMessage":
        """
        Build a message from a ReceiveMessage response entry.

        Args:
            raw: One entry of the ``Messages`` list

        Returns:
            Parsed QueueMessage

        Raises:
            MessageFormatError: If a required field is missing
        """
        required = ('MessageId', 'ReceiptHandle', 'Body', 'MD5OfBody')
        missing = [key for key in required if raw.get(key) in (None, '')]
        if missing:
            raise MessageFormatError(
                f"Received message is missing {', '.join(missing)}"
            )

        return cls(
            message_id=raw['MessageId'],
            receipt_handle=raw['ReceiptHandle'],
            body=raw['Body'],
            md5_of_body=raw['MD5OfBody'],
            attributes=raw.get('Attributes') or {},
            message_attributes=raw.get('MessageAttributes') or {},
        )

    def to_full_json(self) -> str:
        """Render the message with its receipt handle and system attributes."""
        return _dump({
            'Body': self.body,
            'ReceiptHandle': self.receipt_handle,
            'MD5OfBody': self.md5_of_body,
            'MessageId': self.message_id,
            'Attributes': self.attributes,
        })

    def sendable_attributes(self) -> Dict[str, Dict[str, Any]]:
        """
        Custom attributes in the shape SendMessage accepts.

        ReceiveMessage pads every attribute with empty list fields that
        SendMessage rejects for some data types, so only populated fields
        are kept.
        """
        result = {}
        for name, attribute in self.message_attributes.items():
            result[name] = {
                key: value
                for key, value in attribute.items()
                if value not in (None, [], '')
            }
        return result


class SendResult(BaseModel):
    """Identifiers returned by SendMessage."""

    message_id: str
    md5_of_message_body: str

    @classmethod
    def from_sqs(cls, raw: Dict[str, Any]) -> "SendResult":
        """Build a result from a SendMessage response."""
        if not raw.get('MessageId') or not raw.get('MD5OfMessageBody'):
            raise MessageFormatError("SendMessage response is missing identifiers")
        return cls(message_id=raw['MessageId'], md5_of_message_body=raw['MD5OfMessageBody'])

    def to_json(self) -> str:
        return _dump({
            'MD5OfMessageBody': self.md5_of_message_body,
            'MessageId': self.message_id,
        })
