"""Custom exception hierarchy for the trade diary."""


class JournalError(Exception):
    """Base exception for all trade diary errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or missing configuration."""


# --- Trades ---
class TradeValidationError(JournalError):
    """A trade failed entry-time validation."""


class TradeNotFoundError(JournalError):
    """No trade with the requested id exists in the store."""

    def __init__(self, trade_id: str):
        self.trade_id = trade_id
        super().__init__(f"Trade not found: {trade_id}")


# --- Storage ---
class StorageError(JournalError):
    """The journal file could not be read or written."""
