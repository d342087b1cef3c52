"""
Module: reader.py
Description: Queue reader that retries and deduplicates receives.

SQS hands out messages from a distributed fleet, so a single receive may
return nothing even when the queue is not empty, and a message received
with a zero visibility timeout may come back again on the next call. The
reader keeps receiving one message at a time, keyed by message id, until
it has the requested number of distinct messages, then prints them,
forwards them to another queue, and optionally deletes them.

Key Components:
- ReadOptions: What to read and what to do with it
- QueueReader: Collects and dispatches messages
- ReadSummary: Counters reported at the end of a run

Dependencies: pydantic, typing
Author: SQS Reader Team
"""

import sys
from typing import Dict, Optional, TextIO

from pydantic import BaseModel, Field

from sqs_reader.config.settings import Settings, get_settings
from sqs_reader.exceptions import ReaderConfigurationError
from sqs_reader.models.message import QueueMessage
from sqs_reader.sqs_queue.sqs import SQSClient
from sqs_reader.utils.logger import get_logger
from sqs_reader.utils.metrics import MetricsClient

logger = get_logger(__name__)


class ReadOptions(BaseModel):
    """
    Options controlling a single read.

    Attributes:
        stdout: Write messages to the output stream
        read_all: Use ApproximateNumberOfMessages as the count
        count: Number of messages to attempt to read
        block: Keep receiving until count distinct messages were read
        drain: Delete messages after they have been handled
        full: Write full message JSON instead of the body
        keep_attributes: Forward custom message attributes when transferring
    """

    stdout: bool = False
    read_all: bool = False
    count: int = Field(default=1, ge=0)
    block: bool = False
    drain: bool = False
    full: bool = False
    keep_attributes: bool = False


class ReadSummary(BaseModel):
    """Counters for a completed read."""

    received: int = 0
    printed: int = 0
    transferred: int = 0
    deleted: int = 0


class QueueReader:
    """
    Reads messages from one queue and dispatches them.

    Messages are printed and/or transferred first and deleted last, so a
    failure part way through never loses a message that was not handled.
    """

    def __init__(
        self,
        client: SQSClient,
        in_queue: str,
        out_queue: Optional[str] = None,
        options: Optional[ReadOptions] = None,
        output: Optional[TextIO] = None,
        settings: Optional[Settings] = None,
        metrics: Optional[MetricsClient] = None
    ):
        """
        Initialize the reader.

        Args:
            client: SQS client
            in_queue: Name of the queue to read from
            out_queue: Optional name of the queue to transfer messages to
            options: Read options
            output: Stream for message output (defaults to stdout)
            settings: Reader settings (defaults to process settings)
            metrics: Optional metrics client

        Raises:
            ValueError: If in_queue is empty
            ReaderConfigurationError: If messages would have nowhere to go
        """
        if not in_queue or not isinstance(in_queue, str):
            raise ValueError("in_queue must be a non-empty string")

        self.client = client
        self.in_queue = in_queue
        self.out_queue = out_queue
        self.options = options or ReadOptions()
        self.output = output or sys.stdout
        self.settings = settings or get_settings()
        self.metrics = metrics

        if not self.options.stdout and not self.out_queue:
            raise ReaderConfigurationError(
                "Either --stdout or an output queue name must be provided"
            )

        self.in_url: Optional[str] = None
        self.out_url: Optional[str] = None

    @property
    def visibility_timeout(self) -> int:
        if self.options.drain:
            return self.settings.drain_visibility_timeout
        return self.settings.peek_visibility_timeout

    def resolve_queues(self) -> None:
        """Resolve input and output queue URLs."""
        self.in_url = self.client.get_queue_url(self.in_queue)
        if self.out_queue:
            self.out_url = self.client.get_queue_url(self.out_queue)

    def target_count(self, total: int) -> int:
        """
        Number of distinct messages to collect.

        Args:
            total: Approximate number of messages in the input queue

        Returns:
            Requested count, capped at total unless blocking
        """
        requested = total if self.options.read_all else self.options.count
        if self.options.block:
            return requested
        return min(total, requested)

    def collect(self, count: int) -> Dict[str, QueueMessage]:
        """
        Receive until count distinct messages have been collected.

        Without blocking, an empty receive or a run of receives that only
        return already-seen messages ends collection early.

        Returns:
            Messages keyed by message id, in first-received order
        """
        messages: Dict[str, QueueMessage] = {}
        stale_receives = 0

        while len(messages) < count:
            received = self.client.receive_message(
                self.in_url,
                visibility_timeout=self.visibility_timeout,
                wait_time_seconds=self.settings.receive_wait_time_seconds
            )

            new = 0
            for message in received:
                if message.message_id not in messages:
                    new += 1
                messages[message.message_id] = message

            if self.options.block:
                continue
            if not received:
                logger.debug("Empty receive, stopping", collected=len(messages), target=count)
                break

            stale_receives = 0 if new else stale_receives + 1
            if stale_receives >= self.settings.max_stale_receives:
                logger.info(
                    "Only duplicate messages received, stopping",
                    collected=len(messages),
                    target=count,
                    stale_receives=stale_receives
                )
                break

        return messages

    def handle(self, message: QueueMessage, summary: ReadSummary) -> None:
        """Print, transfer and finally delete one message."""
        if self.options.stdout:
            line = message.to_full_json() if self.options.full else message.body
            self._write(line)
            summary.printed += 1

        if self.out_url:
            attributes = message.sendable_attributes() if self.options.keep_attributes else None
            result = self.client.send_message(self.out_url, message.body, attributes)
            self._write(result.to_json())
            summary.transferred += 1

        if self.options.drain:
            self.client.delete_message(self.in_url, message.receipt_handle)
            summary.deleted += 1
            logger.debug("Message deleted", message_id=message.message_id)

    def run(self) -> ReadSummary:
        """
        Read the input queue and dispatch its messages.

        Returns:
            ReadSummary with counters for this run

        Raises:
            QueueNotFoundError: If a queue does not exist
            QueueSizeUnavailableError: If the input queue size cannot be read
            ClientError: If an SQS operation fails
        """
        self.resolve_queues()
        total = self.client.get_approximate_queue_size(self.in_url)
        count = self.target_count(total)

        logger.info(
            "Reading queue",
            in_queue=self.in_queue,
            out_queue=self.out_queue,
            approximate_size=total,
            target=count,
            block=self.options.block,
            drain=self.options.drain
        )

        messages = self.collect(count)
        summary = ReadSummary(received=len(messages))

        for message in messages.values():
            self.handle(message, summary)

        logger.info("Read complete", in_queue=self.in_queue, **summary.model_dump())
        self._publish(summary)
        return summary

    def _write(self, line: str) -> None:
        self.output.write(line + "\n")
        self.output.flush()

    def _publish(self, summary: ReadSummary) -> None:
        if self.metrics is None:
            return
        self.metrics.publish_summary(summary, dimensions={'Queue': self.in_queue})
