"""
Package: reader
Description: Reading, deduplicating and dispatching queue messages.
"""

from sqs_reader.reader.reader import QueueReader, ReadOptions, ReadSummary

__all__ = ["QueueReader", "ReadOptions", "ReadSummary"]
