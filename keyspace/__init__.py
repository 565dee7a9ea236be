"""
Keyspace -- Passphrase Brute-Force Cost Estimator
==================================================

Estimates how long a uniform-random brute-force attack needs to exhaust
the search space of a passphrase, given the character pools it may be
drawn from.

Modules:
    - keyspace.core.models: Character pools and analysis results
    - keyspace.core.engine: Configuration-driven analysis facade
    - keyspace.analyzers: The passphrase analyzer
    - keyspace.output: Console and JSON report output
    - keyspace.cli: Click-based command-line interface
"""

__version__ = "1.0.0"
__tool_name__ = "keyspace"
