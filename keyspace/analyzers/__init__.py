"""
Keyspace Analyzers
===================

Brute-force cost analysis of passphrases over configurable character pools.
"""

from keyspace.analyzers.passphrase import DEFAULT_GUESSES_PER_SECOND, PassphraseAnalyzer

__all__ = ["DEFAULT_GUESSES_PER_SECOND", "PassphraseAnalyzer"]
