"""
Module: test_message.py
Description: Unit tests for message models.

Covers parsing ReceiveMessage/SendMessage entries, the full JSON line
format, and preparing custom attributes for forwarding.
"""

import json

import pytest

from sqs_reader.exceptions import MessageFormatError
from sqs_reader.models.message import QueueMessage, SendResult


@pytest.fixture
def raw_message():
    return {
        "MessageId": "a1b2c3",
        "ReceiptHandle": "handle-1",
        "MD5OfBody": "5d41402abc4b2a76b9719d911017c592",
        "Body": "hello",
        "Attributes": {"SentTimestamp": "1700000000000"},
        "MessageAttributes": {
            "Source": {"StringValue": "billing", "DataType": "String", "StringListValues": [], "BinaryListValues": []}
        },
    }


class TestQueueMessage:
    """Test cases for QueueMessage."""

    def test_from_sqs(self, raw_message):
        """Test parsing a ReceiveMessage entry."""
        message = QueueMessage.from_sqs(raw_message)

        assert message.message_id == "a1b2c3"
        assert message.receipt_handle == "handle-1"
        assert message.body == "hello"
        assert message.attributes == {"SentTimestamp": "1700000000000"}
        assert "Source" in message.message_attributes

    def test_from_sqs_without_attributes(self, raw_message):
        """Test attributes default to empty maps."""
        del raw_message["Attributes"]
        del raw_message["MessageAttributes"]

        message = QueueMessage.from_sqs(raw_message)

        assert message.attributes == {}
        assert message.message_attributes == {}

    @pytest.mark.parametrize("field", ["MessageId", "ReceiptHandle", "Body", "MD5OfBody"])
    def test_from_sqs_missing_field(self, raw_message, field):
        """Test required fields are enforced."""
        del raw_message[field]

        with pytest.raises(MessageFormatError, match=field):
            QueueMessage.from_sqs(raw_message)

    @pytest.mark.parametrize("field", ["MessageId", "ReceiptHandle"])
    def test_from_sqs_empty_field(self, raw_message, field):
        """Test empty identifiers are reported as missing."""
        raw_message[field] = ""

        with pytest.raises(MessageFormatError, match=field):
            QueueMessage.from_sqs(raw_message)

    def test_to_full_json(self, raw_message):
        """Test full output is compact JSON with sorted keys."""
        line = QueueMessage.from_sqs(raw_message).to_full_json()

        assert line == (
            '{"Attributes":{"SentTimestamp":"1700000000000"},"Body":"hello",'
            '"MD5OfBody":"5d41402abc4b2a76b9719d911017c592","MessageId":"a1b2c3",'
            '"ReceiptHandle":"handle-1"}'
        )
        assert "MessageAttributes" not in json.loads(line)

    def test_sendable_attributes_drops_empty_fields(self, raw_message):
        """Test padding fields from ReceiveMessage are stripped."""
        message = QueueMessage.from_sqs(raw_message)

        assert message.sendable_attributes() == {
            "Source": {"StringValue": "billing", "DataType": "String"}
        }


class TestSendResult:
    """Test cases for SendResult."""

    def test_to_json(self):
        result = SendResult.from_sqs({"MessageId": "m-1", "MD5OfMessageBody": "abc"})

        assert result.to_json() == '{"MD5OfMessageBody":"abc","MessageId":"m-1"}'

    def test_missing_identifiers(self):
        with pytest.raises(MessageFormatError):
            SendResult.from_sqs({"MessageId": "m-1"})
