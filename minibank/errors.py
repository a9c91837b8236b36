"""
Banking Error Kinds

Domain-specific exceptions raised by the registries, the operation ledger
and the persistence gateway. Callers at the boundary (the web API) translate
them into user-facing messages.
"""


class BankingError(Exception):
    """Base class for all minibank errors"""
    pass


class InvalidInput(BankingError, ValueError):
    """Bad or missing user-provided input (empty name, non-positive amount)"""
    pass


class NotFound(BankingError, LookupError):
    """A referenced user or account does not exist"""
    pass


class AccountInactive(BankingError):
    """An operation was attempted on a deactivated account"""
    pass


class InsufficientFunds(BankingError):
    """A withdrawal exceeds the account balance"""
    pass


class StorageIOError(BankingError, OSError):
    """Reading or writing the snapshot file failed"""
    pass


class StorageParseError(BankingError, ValueError):
    """The snapshot file content is malformed"""
    pass
