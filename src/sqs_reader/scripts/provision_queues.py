#!/usr/bin/env python3
"""
Script: provision_queues.py
Description: Create the declared input and output queues through the SQS API.

For local stacks and accounts that are not managed by Terraform. Queue
parameters match terraform/queues.tf; names come from settings
(INPUT_QUEUE_NAME, OUTPUT_QUEUE_NAME).

Usage:
    sqs-reader-provision [--dry-run]
"""

import argparse
import json
import sys
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from sqs_reader.config.settings import get_settings
from sqs_reader.models.queue import QueueConfig, declared_queues
from sqs_reader.sqs_queue.sqs import SQSClient
from sqs_reader.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def ensure_queue(client: SQSClient, config: QueueConfig) -> str:
    """
    Create a queue, or update its attributes if it already exists.

    Args:
        client: SQS client
        config: Queue declaration

    Returns:
        Queue URL

    Raises:
        ClientError: If SQS operation fails
    """
    try:
        queue_url = client.create_queue(config)
        logger.info("Queue created", queue_name=config.name, queue_url=queue_url)
        return queue_url

    except ClientError as e:
        code = e.response.get('Error', {}).get('Code')
        if code not in ('QueueAlreadyExists', 'QueueNameExists'):
            logger.error(
                "Failed to create queue",
                queue_name=config.name,
                error_code=code,
                error_message=e.response['Error'].get('Message')
            )
            raise

    queue_url = client.get_queue_url(config.name)
    attributes = config.to_attributes()
    # FifoQueue cannot be changed after creation
    attributes.pop('FifoQueue', None)
    client.set_queue_attributes(queue_url, attributes)
    logger.info("Queue attributes updated", queue_name=config.name, queue_url=queue_url)
    return queue_url


def main(argv: Optional[List[str]] = None) -> None:
    """Main script execution."""
    parser = argparse.ArgumentParser(
        prog="sqs-reader-provision",
        description="Create the declared SQS reader queues"
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Print the queue declarations without calling AWS'
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)
    queues = declared_queues(settings)

    if args.dry_run:
        print(json.dumps([queue.model_dump() for queue in queues], indent=2))
        return

    try:
        client = SQSClient(settings)
        for queue in queues:
            print(ensure_queue(client, queue))

    except (ClientError, BotoCoreError) as e:
        logger.error("Queue provisioning failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
