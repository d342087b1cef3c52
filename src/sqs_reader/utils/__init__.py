"""
Module: utils
Description: Package initialization for utility functions.

This package contains shared helpers used throughout the reader.

Current utilities:
- logger: Structured logging configuration and helpers
- metrics: CloudWatch custom metrics publishing
"""

__all__ = []
