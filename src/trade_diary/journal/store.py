"""Trade persistence.

``ITradeStore`` is the protocol the analytics read from.  Two
implementations ship:

* ``MemoryTradeStore`` -- for tests and throwaway sessions.
* ``JsonFileTradeStore`` -- the journal file: a JSON array of trade
  objects, newest first, rewritten atomically on every change.

``list()`` hands out an immutable snapshot; the analytics never see
the store's internal list.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from trade_diary.core.errors import StorageError, TradeNotFoundError, TradeValidationError
from trade_diary.core.file_io import atomic_write_text

from .record import Trade

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Entry validation
# ---------------------------------------------------------------------------


def build_trade(**fields: Any) -> Trade:
    """Construct a Trade, reporting bad input as ``TradeValidationError``."""
    try:
        trade = Trade(**fields)
    except ValidationError as exc:
        raise TradeValidationError(str(exc)) from exc
    validate_for_entry(trade)
    return trade


def validate_for_entry(trade: Trade) -> None:
    """Checks the journal enforces when a trade is recorded or edited."""
    if not trade.asset:
        raise TradeValidationError("asset must not be empty")
    if trade.lots <= 0:
        raise TradeValidationError(f"lots must be positive, got {trade.lots}")
    if not trade.reasons:
        raise TradeValidationError("select at least one entry reason")


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class ITradeStore(Protocol):
    """Ordered collection of journaled trades."""

    def list(self) -> tuple[Trade, ...]:
        """Immutable snapshot, newest entry first."""
        ...

    def get(self, trade_id: str) -> Trade:
        """Return the trade or raise ``TradeNotFoundError``."""
        ...

    def add(self, trade: Trade) -> Trade:
        """Record a new trade."""
        ...

    def update(self, trade: Trade) -> Trade:
        """Replace the trade with the same id."""
        ...

    def delete(self, trade_id: str) -> None:
        """Remove a trade."""
        ...


# ---------------------------------------------------------------------------
# MemoryTradeStore  (tests + throwaway sessions)
# ---------------------------------------------------------------------------


class MemoryTradeStore:
    """In-memory implementation -- no persistence."""

    def __init__(self, trades: list[Trade] | None = None) -> None:
        self._items: list[Trade] = list(trades or [])

    def list(self) -> tuple[Trade, ...]:
        return tuple(self._items)

    def get(self, trade_id: str) -> Trade:
        return self._items[self._index(trade_id)]

    def add(self, trade: Trade) -> Trade:
        validate_for_entry(trade)
        if any(t.id == trade.id for t in self._items):
            raise TradeValidationError(f"duplicate trade id: {trade.id}")
        self._commit([trade, *self._items])
        logger.info("Recorded trade %s (%s %s)", trade.id, trade.asset, trade.result)
        return trade

    def update(self, trade: Trade) -> Trade:
        validate_for_entry(trade)
        idx = self._index(trade.id)
        replaced = trade.model_copy(update={
            "created_at": self._items[idx].created_at,
            "updated_at": datetime.now(timezone.utc),
        })
        items = list(self._items)
        items[idx] = replaced
        self._commit(items)
        logger.info("Updated trade %s", trade.id)
        return replaced

    def delete(self, trade_id: str) -> None:
        items = list(self._items)
        del items[self._index(trade_id)]
        self._commit(items)
        logger.info("Deleted trade %s", trade_id)

    # -- internals ----------------------------------------------------------

    def _index(self, trade_id: str) -> int:
        for i, t in enumerate(self._items):
            if t.id == trade_id:
                return i
        raise TradeNotFoundError(trade_id)

    def _commit(self, items: list[Trade]) -> None:
        """Install the new item list.  Persistent subclasses save it first
        and leave the current list untouched when saving fails."""
        self._items = items

    def __len__(self) -> int:
        return len(self._items)


# ---------------------------------------------------------------------------
# JsonFileTradeStore  (the journal file)
# ---------------------------------------------------------------------------


class JsonFileTradeStore(MemoryTradeStore):
    """JSON-array file-backed implementation.

    Loads on init.  Malformed entries are skipped with a warning; an
    unreadable file loads as an empty journal.  Write failures raise
    ``StorageError``.
    """

    def __init__(self, path: str | Path = "data/trades.json") -> None:
        super().__init__()
        self._path = Path(path)
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        if not self._path.exists():
            return

        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "[]")
        except (OSError, json.JSONDecodeError):
            logger.exception("Failed to load trades from %s", self._path)
            return

        if not isinstance(data, list):
            logger.error("Journal %s is not a JSON array, ignoring it", self._path)
            return

        for entry in data:
            try:
                self._items.append(Trade.model_validate(entry))
            except ValidationError:
                logger.warning("Skipping malformed trade entry in %s", self._path)

        if self._items:
            logger.info("Loaded %d trades from %s", len(self._items), self._path)

    def _commit(self, items: list[Trade]) -> None:
        payload = json.dumps(
            [t.to_dict() for t in items], indent=2, ensure_ascii=False,
        )
        try:
            atomic_write_text(self._path, payload)
        except OSError as exc:
            raise StorageError(f"Failed to save trades to {self._path}: {exc}") from exc
        self._items = items
