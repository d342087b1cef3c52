"""
Module: conftest.py
Description: Shared pytest fixtures for SQS reader tests.

Provides reusable fixtures for settings, mocked SQS queues and sample
messages. Uses moto for AWS service mocking to enable fast, isolated
tests without credentials.
"""

import boto3
import pytest
from moto import mock_aws

from sqs_reader.config.settings import Settings
from sqs_reader.models.message import QueueMessage
from sqs_reader.sqs_queue.sqs import SQSClient

REGION = "us-east-1"


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Point boto3 at fake credentials so nothing reaches a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)


@pytest.fixture
def test_settings():
    """
    Provide test configuration settings.

    Disables .env loading and backoff so retry tests run instantly.
    """
    return Settings(
        _env_file=None,
        log_level="DEBUG",
        aws_region=REGION,
        aws_endpoint_url=None,
        input_queue_name="test-input",
        output_queue_name="test-output",
        max_retry_attempts=3,
        retry_backoff_seconds=0,
        max_stale_receives=3,
        metrics_enabled=False
    )


@pytest.fixture
def mock_sqs():
    """Start moto and provide a raw boto3 SQS client."""
    with mock_aws():
        yield boto3.client("sqs", region_name=REGION)


@pytest.fixture
def queue_urls(mock_sqs, test_settings):
    """Create the input and output queues, returning their URLs by role."""
    return {
        "input": mock_sqs.create_queue(QueueName=test_settings.input_queue_name)["QueueUrl"],
        "output": mock_sqs.create_queue(QueueName=test_settings.output_queue_name)["QueueUrl"],
    }


@pytest.fixture
def sqs_client(mock_sqs, test_settings):
    """Provide an SQSClient bound to the mocked SQS service."""
    return SQSClient(test_settings, client=mock_sqs)


@pytest.fixture
def seed_messages(mock_sqs, queue_urls):
    """Return a helper that sends bodies to the input queue."""
    def _seed(*bodies, **attributes):
        for body in bodies:
            kwargs = {"QueueUrl": queue_urls["input"], "MessageBody": body}
            if attributes:
                kwargs["MessageAttributes"] = attributes
            mock_sqs.send_message(**kwargs)
    return _seed


@pytest.fixture
def make_message():
    """Return a factory for QueueMessage instances."""
    def _make(message_id="msg-1", body="hello", **overrides):
        values = {
            "message_id": message_id,
            "receipt_handle": f"receipt-{message_id}",
            "body": body,
            "md5_of_body": "5d41402abc4b2a76b9719d911017c592",
            "attributes": {"ApproximateReceiveCount": "1"},
        }
        values.update(overrides)
        return QueueMessage(**values)
    return _make
