"""
Keyspace Core Module
=====================

Data models for the Keyspace analyzer. The engine lives in
:mod:`keyspace.core.engine`.
"""

from keyspace.core.models import (
    BUILTIN_POOLS,
    LOWERCASE_LETTERS,
    NUMBERS,
    SPACE,
    SYMBOLS,
    UPPERCASE_LETTERS,
    AnalysisResult,
    CharacterPool,
    PoolKind,
)

__all__ = [
    "AnalysisResult",
    "BUILTIN_POOLS",
    "CharacterPool",
    "LOWERCASE_LETTERS",
    "NUMBERS",
    "PoolKind",
    "SPACE",
    "SYMBOLS",
    "UPPERCASE_LETTERS",
]
