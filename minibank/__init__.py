"""
Minibank

A small banking demo: users, accounts and deposit/withdraw operations
behind a JSON web API, persisted as a single JSON snapshot file.
"""

__version__ = "1.0.0"
