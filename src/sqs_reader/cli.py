"""
Module: cli.py
Description: Command line entry point for the SQS reader.

Simple SQS queue reader. Automatically retries and deduplicates until the
desired number of messages have been read. Can either output messages to
stdout or transfer them to another queue.

Usage:
    sqs-reader <in-queue> [--stdout] [--all | --count N] [--block] [--drain] [--full]
    sqs-reader <in-queue> <out-queue> [--stdout] [--all | --count N] [--block] [--drain] [--full]
"""

import argparse
import sys
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from sqs_reader.config.settings import get_settings
from sqs_reader.exceptions import SQSReaderError
from sqs_reader.reader.reader import QueueReader, ReadOptions
from sqs_reader.sqs_queue.sqs import SQSClient
from sqs_reader.utils.logger import configure_logging, get_logger
from sqs_reader.utils.metrics import MetricsClient

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    """Build the sqs-reader argument parser."""
    parser = argparse.ArgumentParser(
        prog="sqs-reader",
        description=(
            "Simple SQS queue reader. Automatically retries and deduplicates "
            "until the desired number of messages have been read. Can either "
            "output messages to stdout or transfer them to another queue."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sqs-reader my-queue --stdout
  sqs-reader my-queue --stdout --all --full
  sqs-reader my-dlq my-queue --all --drain

Custom message attributes are only carried over to the output queue
with --keep-attributes.
        """
    )

    parser.add_argument('in_queue', metavar='in-queue', help='Queue to read from')
    parser.add_argument(
        'out_queue',
        metavar='out-queue',
        nargs='?',
        default=None,
        help='Queue to transfer messages to'
    )
    parser.add_argument('--stdout', action='store_true', help='Dump messages to stdout')

    amount = parser.add_mutually_exclusive_group()
    amount.add_argument(
        '--all',
        dest='read_all',
        action='store_true',
        help='Read all messages from queue. Uses ApproximateNumberOfMessages '
             'to guess number of messages in the queue'
    )
    amount.add_argument(
        '--count',
        type=_non_negative_int,
        default=1,
        help='Number of messages to attempt to read (default: 1)'
    )

    parser.add_argument(
        '--block',
        action='store_true',
        help='Keep receiving until the desired number of messages has been read. '
             'Can hold every message on the queue invisible to other readers '
             'for an indeterminate amount of time. Use with caution'
    )
    parser.add_argument(
        '--drain',
        action='store_true',
        help='Remove messages from queue after all have been read'
    )
    parser.add_argument(
        '--full',
        action='store_true',
        help='Print full message with attributes instead of just the body'
    )
    parser.add_argument(
        '--keep-attributes',
        action='store_true',
        help='Forward custom message attributes when transferring'
    )

    return parser


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid count: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"count must not be negative: {number}")
    return number


def run(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments and run one read.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error("Invalid settings", error_count=e.error_count())
        print(f"Error: invalid settings\n{e}", file=sys.stderr)
        return EXIT_ERROR

    configure_logging(settings.log_level)

    options = ReadOptions(
        stdout=args.stdout,
        read_all=args.read_all,
        count=args.count,
        block=args.block,
        drain=args.drain,
        full=args.full,
        keep_attributes=args.keep_attributes
    )

    try:
        metrics = None
        if settings.metrics_enabled:
            metrics = MetricsClient(
                namespace=settings.metrics_namespace,
                region_name=settings.aws_region,
                endpoint_url=settings.aws_endpoint_url
            )

        reader = QueueReader(
            SQSClient(settings),
            in_queue=args.in_queue,
            out_queue=args.out_queue,
            options=options,
            settings=settings,
            metrics=metrics
        )
        reader.run()

    except KeyboardInterrupt:
        print("Cancelled by user.", file=sys.stderr)
        return EXIT_INTERRUPTED

    except SQSReaderError as e:
        logger.error("Read failed", error=str(e), error_type=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    except (ClientError, BotoCoreError) as e:
        logger.error("AWS request failed", error=str(e), error_type=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_OK


def main() -> None:
    """Console script entry point."""
    sys.exit(run())


if __name__ == '__main__':
    main()
