"""Allows running the Keyspace CLI via: python -m keyspace"""

from keyspace.cli import main

if __name__ == "__main__":
    main()
