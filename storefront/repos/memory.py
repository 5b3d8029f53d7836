# storefront/repos/memory.py
import itertools
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Tuple

from storefront.utils.logging import get_logger

logger = get_logger(__name__)

TABLES = ("users", "products", "cart_items", "orders", "order_items")


class MemoryTables:
    """
    Magazyn w pamieci procesu.
    - jedna mapa id -> wiersz na tabele
    - jeden alokator id (licznik na tabele) nalezacy do magazynu
    - lock chroni pojedyncze operacje, nie cala transakcje
      (kolejnosc operacji jednego usera zapewnia UserLockService)
    - transakcja = dziennik zmian (undo log) biezacego watku
    """

    def __init__(self):
        self.lock = threading.RLock()
        self.rows: Dict[str, Dict[int, Any]] = {name: {} for name in TABLES}
        self._counters = {name: itertools.count(1) for name in TABLES}
        self._local = threading.local()

    def next_id(self, table: str) -> int:
        with self.lock:
            return next(self._counters[table])

    @property
    def journal(self) -> List[Tuple] | None:
        return getattr(self._local, "journal", None)

    def _record(self, entry: Tuple) -> None:
        if self.journal is not None:
            self.journal.append(entry)

    # zapisy przechodza tylko przez te trzy metody, zeby dalo sie je cofnac
    def insert(self, table: str, row):
        with self.lock:
            row.id = self.next_id(table)
            if hasattr(row, "created_at") and row.created_at is None:
                row.created_at = datetime.now(timezone.utc)
            self.rows[table][row.id] = row
            self._record(("insert", table, row.id))
            return row

    def update(self, row, **changes):
        with self.lock:
            previous = {field: getattr(row, field) for field in changes}
            for field, value in changes.items():
                setattr(row, field, value)
            self._record(("update", row, previous))
            return row

    def delete(self, table: str, row_id: int) -> bool:
        with self.lock:
            row = self.rows[table].pop(row_id, None)
            if row is None:
                return False
            self._record(("delete", table, row))
            return True

    def _undo(self, journal: List[Tuple]) -> None:
        with self.lock:
            for entry in reversed(journal):
                kind = entry[0]
                if kind == "insert":
                    _, table, row_id = entry
                    self.rows[table].pop(row_id, None)
                elif kind == "delete":
                    _, table, row = entry
                    self.rows[table][row.id] = row
                else:
                    _, row, previous = entry
                    for field, value in previous.items():
                        setattr(row, field, value)

    @contextmanager
    def transaction(self) -> Iterator[List[Tuple]]:
        """Wszystko albo nic: przy wyjatku cofa zmiany zapisane w dzienniku."""
        if self.journal is not None:
            # zagniezdzona transakcja dolacza do zewnetrznej
            yield self.journal
            return

        journal: List[Tuple] = []
        self._local.journal = journal
        try:
            yield journal
        except Exception:
            logger.warning(f"Rolling back in-memory transaction ({len(journal)} changes)")
            self._undo(journal)
            raise
        finally:
            self._local.journal = None
