"""
Module: sqs.py
Description: SQS client for queue reader operations.

Handles queue URL resolution, approximate size lookups, receiving
messages one at a time, forwarding bodies to another queue and deleting
messages once they have been handled. Throttling and transient service
errors are retried with exponential backoff.
"""

from typing import Any, Callable, Dict, List, Optional

import boto3
from botocore.exceptions import ClientError, EndpointConnectionError
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from sqs_reader.config.settings import Settings, get_settings
from sqs_reader.exceptions import QueueNotFoundError, QueueSizeUnavailableError
from sqs_reader.models.message import QueueMessage, SendResult
from sqs_reader.models.queue import QueueConfig
from sqs_reader.utils.logger import get_logger

logger = get_logger(__name__)

RETRYABLE_ERROR_CODES = frozenset({
    'Throttling',
    'ThrottlingException',
    'RequestThrottled',
    'ServiceUnavailable',
    'InternalError',
    'InternalFailure',
})

QUEUE_MISSING_ERROR_CODES = frozenset({
    'AWS.SimpleQueueService.NonExistentQueue',
    'QueueDoesNotExist',
})


def is_retryable(exc: BaseException) -> bool:
    """Return True for throttling, transient service and connection errors."""
    if isinstance(exc, EndpointConnectionError):
        return True
    if isinstance(exc, ClientError):
        return exc.response.get('Error', {}).get('Code') in RETRYABLE_ERROR_CODES
    return False


def _log_retry(retry_state) -> None:
    logger.warning(
        "Retrying SQS call",
        operation=getattr(retry_state.fn, '__name__', None),
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception())
    )


def _error_code(exc: ClientError) -> Optional[str]:
    return exc.response.get('Error', {}).get('Code')


class SQSClient:
    """
    SQS client for queue reader operations.

    Wraps a boto3 SQS client; every call goes through a tenacity retry
    policy built from the settings.
    """

    def __init__(self, settings: Optional[Settings] = None, client: Any = None):
        """
        Initialize SQS client.

        Args:
            settings: Reader settings (defaults to process settings)
            client: Preconfigured boto3 SQS client, mostly for tests
        """
        self.settings = settings or get_settings()
        self.sqs = client or boto3.client(
            'sqs',
            region_name=self.settings.aws_region,
            endpoint_url=self.settings.aws_endpoint_url
        )
        self._retrying = Retrying(
            stop=stop_after_attempt(self.settings.max_retry_attempts),
            wait=wait_exponential(multiplier=self.settings.retry_backoff_seconds, max=30),
            retry=retry_if_exception(is_retryable),
            before_sleep=_log_retry,
            reraise=True
        )

        logger.debug(
            "SQS client initialized",
            region=self.settings.aws_region,
            endpoint_url=self.settings.aws_endpoint_url
        )

    def _call(self, operation: Callable[..., Dict[str, Any]], **kwargs) -> Dict[str, Any]:
        return self._retrying(operation, **kwargs)

    def get_queue_url(self, queue_name: str) -> str:
        """
        Resolve a queue name to its URL.

        Args:
            queue_name: Name of the queue

        Returns:
            Queue URL

        Raises:
            QueueNotFoundError: If the queue does not exist
            ClientError: If SQS operation fails otherwise
        """
        if not queue_name or not isinstance(queue_name, str):
            raise ValueError("queue_name must be a non-empty string")

        try:
            response = self._call(self.sqs.get_queue_url, QueueName=queue_name)
        except ClientError as e:
            if _error_code(e) in QUEUE_MISSING_ERROR_CODES:
                raise QueueNotFoundError(queue_name) from e
            logger.error(
                "Failed to resolve queue URL",
                queue_name=queue_name,
                error_code=_error_code(e),
                error_message=e.response['Error'].get('Message')
            )
            raise

        queue_url = response['QueueUrl']
        logger.debug("Queue URL resolved", queue_name=queue_name, queue_url=queue_url)
        return queue_url

    def get_approximate_queue_size(self, queue_url: str) -> int:
        """
        Read ApproximateNumberOfMessages for a queue.

        Raises:
            QueueSizeUnavailableError: If the attribute cannot be read or parsed
        """
        try:
            response = self._call(
                self.sqs.get_queue_attributes,
                QueueUrl=queue_url,
                AttributeNames=['ApproximateNumberOfMessages']
            )
        except ClientError as e:
            logger.error(
                "Failed to read queue attributes",
                queue_url=queue_url,
                error_code=_error_code(e)
            )
            raise QueueSizeUnavailableError(
                f"Could not get approximate size of {queue_url}"
            ) from e

        value = response.get('Attributes', {}).get('ApproximateNumberOfMessages')
        try:
            size = int(value)
        except (TypeError, ValueError):
            raise QueueSizeUnavailableError(
                f"No usable ApproximateNumberOfMessages for {queue_url}: {value!r}"
            )
        if size < 0:
            raise QueueSizeUnavailableError(
                f"Negative ApproximateNumberOfMessages for {queue_url}: {size}"
            )
        return size

    def receive_message(
        self,
        queue_url: str,
        visibility_timeout: int,
        wait_time_seconds: Optional[int] = None,
        max_number_of_messages: int = 1
    ) -> List[QueueMessage]:
        """
        Receive messages with all system and custom attributes.

        Args:
            queue_url: Queue to read from
            visibility_timeout: Seconds the received messages stay hidden
            wait_time_seconds: Long polling wait time; None leaves the
                queue's ReceiveMessageWaitTimeSeconds in effect
            max_number_of_messages: Upper bound on returned messages (1-10)

        Returns:
            Received messages, possibly empty
        """
        if not 1 <= max_number_of_messages <= 10:
            raise ValueError("max_number_of_messages must be between 1 and 10")

        kwargs = {
            'QueueUrl': queue_url,
            'AttributeNames': ['All'],
            'MessageAttributeNames': ['All'],
            'MaxNumberOfMessages': max_number_of_messages,
            'VisibilityTimeout': visibility_timeout,
        }
        if wait_time_seconds is not None:
            kwargs['WaitTimeSeconds'] = wait_time_seconds

        response = self._call(self.sqs.receive_message, **kwargs)

        messages = [QueueMessage.from_sqs(raw) for raw in response.get('Messages', [])]
        logger.debug(
            "Messages received",
            queue_url=queue_url,
            count=len(messages),
            message_ids=[m.message_id for m in messages]
        )
        return messages

    def send_message(
        self,
        queue_url: str,
        body: str,
        message_attributes: Optional[Dict[str, Dict[str, Any]]] = None
    ) -> SendResult:
        """
        Send a message body to a queue.

        Args:
            queue_url: Destination queue URL
            body: Message body
            message_attributes: Optional custom attributes

        Returns:
            SendResult with the new message id and body digest

        Raises:
            ClientError: If SQS operation fails
        """
        kwargs = {'QueueUrl': queue_url, 'MessageBody': body}
        if message_attributes:
            kwargs['MessageAttributes'] = message_attributes

        try:
            response = self._call(self.sqs.send_message, **kwargs)
        except ClientError as e:
            logger.error(
                "Failed to send message to SQS",
                queue_url=queue_url,
                error_code=_error_code(e),
                error_message=e.response['Error'].get('Message')
            )
            raise

        result = SendResult.from_sqs(response)
        logger.info(
            "Message sent to SQS",
            message_id=result.message_id,
            queue_url=queue_url
        )
        return result

    def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        """
        Delete a message by receipt handle.

        Raises:
            ClientError: If SQS operation fails
        """
        try:
            self._call(
                self.sqs.delete_message,
                QueueUrl=queue_url,
                ReceiptHandle=receipt_handle
            )
        except ClientError as e:
            logger.error(
                "Failed to delete message from SQS",
                queue_url=queue_url,
                error_code=_error_code(e),
                error_message=e.response['Error'].get('Message')
            )
            raise

    def create_queue(self, config: QueueConfig) -> str:
        """Create a queue from its declaration and return its URL."""
        response = self._call(
            self.sqs.create_queue,
            QueueName=config.name,
            Attributes=config.to_attributes()
        )
        return response['QueueUrl']

    def set_queue_attributes(self, queue_url: str, attributes: Dict[str, str]) -> None:
        self._call(
            self.sqs.set_queue_attributes,
            QueueUrl=queue_url,
            Attributes=attributes
        )
