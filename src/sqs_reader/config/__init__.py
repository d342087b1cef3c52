"""
Package: config
Description: Reader configuration loaded from the environment.
"""

from sqs_reader.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
