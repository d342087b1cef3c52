"""
Package: sqs_queue
Description: SQS message queue operations for the reader.

Provides a client for resolving queues, reading their approximate size,
receiving, sending and deleting messages, and provisioning declared queues.
"""
