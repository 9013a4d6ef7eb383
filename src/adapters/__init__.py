"""I/O adapters: HTTP clients for the wallet service and P2WDB, BCH transactions."""
