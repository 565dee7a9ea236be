"""
Keyspace Shared Module
======================

Configuration, logging and console infrastructure used by the Keyspace
analyzer, engine and CLI.
"""

from shared.config import ConfigError, KeyspaceConfig

__all__ = ["ConfigError", "KeyspaceConfig"]
