"""Core contracts (Protocol) implemented by the concrete adapters.

Command services depend on these so the wallet, P2WDB and message clients
can be swapped for fakes.
"""
