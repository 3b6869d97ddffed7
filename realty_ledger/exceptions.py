"""Custom exception hierarchy for realty-ledger."""


class LedgerError(Exception):
    """Base exception for all realty-ledger errors."""


class EntityNotFoundError(LedgerError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidRecordError(LedgerError):
    """Raised when a raw record cannot be converted into an entity."""


class ConfigurationError(LedgerError):
    """Raised when configuration is invalid or missing."""


class SinkError(LedgerError):
    """Raised when a sink operation fails."""
