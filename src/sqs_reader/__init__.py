"""
Package: sqs_reader
Description: Simple SQS queue reader.

Reads messages from an SQS queue, retrying and deduplicating until the
desired number of messages has been read, and either dumps them to stdout
or transfers them to another queue.
"""

__version__ = "0.3.0"
