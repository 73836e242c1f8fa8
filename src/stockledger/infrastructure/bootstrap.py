"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

One ``JsonStore`` is shared per data directory: its lock is what keeps
writers in this process from interleaving file writes.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from stockledger.config import Settings, get_settings
from stockledger.domain.repository.item_repository import ItemRepository
from stockledger.domain.repository.transaction_log import TransactionLog
from stockledger.domain.service.clock import Clock, SystemClock
from stockledger.domain.service.ledger_engine import LedgerEngine
from stockledger.domain.service.reorder_monitor import ReorderMonitor
from stockledger.domain.service.reporting import ReportingService
from stockledger.infrastructure.persistence.json_item_repository import JsonItemRepository
from stockledger.infrastructure.persistence.json_store import JsonStore
from stockledger.infrastructure.persistence.json_transaction_log import JsonTransactionLog
from stockledger.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork
from stockledger.logging_config import configure_logging


@dataclass(frozen=True)
class Services:
    settings: Settings
    item_repo: ItemRepository
    transaction_log: TransactionLog
    engine: LedgerEngine
    reorder_monitor: ReorderMonitor
    reporting: ReportingService


@lru_cache(maxsize=None)
def json_store(data_dir: Path) -> JsonStore:
    return JsonStore(data_dir)


def build_services(settings: Settings, clock: Clock | None = None) -> Services:
    clock = clock or SystemClock()
    store = json_store(Path(settings.DATA_DIR).expanduser().resolve())
    item_repo = JsonItemRepository(store, clock)
    transaction_log = JsonTransactionLog(store, clock)
    engine = LedgerEngine(
        item_repo=item_repo,
        uow_factory=lambda: JsonUnitOfWork(store, clock),
        max_attempts=settings.MAX_APPLY_ATTEMPTS,
    )
    return Services(
        settings=settings,
        item_repo=item_repo,
        transaction_log=transaction_log,
        engine=engine,
        reorder_monitor=ReorderMonitor(item_repo),
        reporting=ReportingService(item_repo, transaction_log, clock),
    )


@lru_cache(maxsize=1)
def services() -> Services:
    """Process-wide services built from the environment's settings."""
    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_lines=settings.LOG_JSON)
    return build_services(settings)
