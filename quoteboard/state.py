"""Application state container"""
import logging
import threading
from dataclasses import dataclass
from datetime import datetime

from . import storage
from .config import DB_PATH, REFRESH_EVERY_TICKS, LIST_TOP_ROW
from .errors import QuoteError
from .quotes import fetch_quotes
from .stock import Stock

log = logging.getLogger(__name__)


class Normal:
    """Browsing the list."""

    def __eq__(self, other):
        return isinstance(other, Normal)

    def __repr__(self):
        return "Normal()"


class AddingCode:
    """Typing a new code. The buffer lives and dies with this mode."""

    def __init__(self, buffer=""):
        self.buffer = buffer

    def __eq__(self, other):
        return isinstance(other, AddingCode) and other.buffer == self.buffer

    def __repr__(self):
        return f"AddingCode({self.buffer!r})"


@dataclass(frozen=True)
class Snapshot:
    """What the renderer reads each frame."""
    stocks: tuple
    selected: object  # Optional[int]
    mode: object
    input_buffer: str
    last_error: str
    last_refresh: object  # Optional[datetime]
    status_message: str


def spawn_thread(target, *args):
    """Fire-and-forget worker. Never joined, dies with the process."""
    t = threading.Thread(target=target, args=args, daemon=True)
    t.start()
    return t


class AppState:
    """Owns the tracked stocks, the UI mode and the selection cursor.

    ``stocks``, ``last_error`` and ``last_refresh`` are shared with fetch
    workers and only touched under ``_lock``. Everything else belongs to the
    UI thread.
    """

    def __init__(self, db_path=DB_PATH, fetcher=fetch_quotes, spawn=spawn_thread):
        self.db_path = db_path
        self._fetcher = fetcher
        self._spawn = spawn
        self._lock = threading.Lock()

        # Shared with workers
        self._stocks = []
        self._last_error = ""
        self._last_refresh = None
        self._generation = 0
        self._applied_generation = 0
        self._closed = False

        # UI thread only
        self.mode = Normal()
        self._selected = None
        self.tick_count = 0
        self.should_exit = False
        self.status_message = ""
        self.list_offset = 0
        self.list_rows = 0

    # --- lifecycle ---

    def start(self):
        """Hydrate from disk and kick off the first refresh."""
        self.load_codes()
        log.info("Loaded %d stock(s) from %s", len(self._stocks), self.db_path)
        self.refresh()

    def shutdown(self):
        """Stop accepting write-backs from workers still in flight."""
        with self._lock:
            self._closed = True

    # --- read side ---

    @property
    def stocks(self):
        """Copies of the tracked stocks, in display order."""
        with self._lock:
            return [s.copy() for s in self._stocks]

    @property
    def codes(self):
        with self._lock:
            return [s.code for s in self._stocks]

    @property
    def selected(self):
        """Selection index, or None. A stale index reads as None."""
        with self._lock:
            return self._valid_selection(len(self._stocks))

    def _valid_selection(self, total):
        if self._selected is not None and 0 <= self._selected < total:
            return self._selected
        return None

    @property
    def input_buffer(self):
        return self.mode.buffer if isinstance(self.mode, AddingCode) else ""

    @property
    def last_error(self):
        with self._lock:
            return self._last_error

    @property
    def last_refresh(self):
        with self._lock:
            return self._last_refresh

    def snapshot(self):
        with self._lock:
            stocks = tuple(s.copy() for s in self._stocks)
            selected = self._valid_selection(len(stocks))
            last_error = self._last_error
            last_refresh = self._last_refresh
        return Snapshot(
            stocks=stocks,
            selected=selected,
            mode=self.mode,
            input_buffer=self.input_buffer,
            last_error=last_error,
            last_refresh=last_refresh,
            status_message=self.status_message,
        )

    # --- persistence ---

    def load_codes(self):
        codes = storage.load_codes(self.db_path)
        with self._lock:
            self._stocks = [Stock(code) for code in codes]
            self._selected = None

    def save_codes(self):
        storage.save_codes(self.codes, self.db_path)

    # --- structural mutations ---

    def add_stock(self, code):
        """Append ``code`` (duplicates allowed), refresh, persist."""
        with self._lock:
            self._stocks.append(Stock(code))
        self.refresh()
        self.save_codes()

    def delete_selected(self):
        with self._lock:
            sel = self._valid_selection(len(self._stocks))
            if sel is None:
                return False
            del self._stocks[sel]
            self._selected = None
        self.save_codes()
        return True

    def move_selected_up(self):
        with self._lock:
            sel = self._valid_selection(len(self._stocks))
            if sel is None or sel == 0:
                return False
            self._stocks[sel - 1], self._stocks[sel] = self._stocks[sel], self._stocks[sel - 1]
            self._selected = sel - 1
        self.save_codes()
        return True

    def move_selected_down(self):
        with self._lock:
            total = len(self._stocks)
            sel = self._valid_selection(total)
            if sel is None or sel >= total - 1:
                return False
            self._stocks[sel + 1], self._stocks[sel] = self._stocks[sel], self._stocks[sel + 1]
            self._selected = sel + 1
        self.save_codes()
        return True

    # --- cursor ---

    def move_selection_up(self):
        with self._lock:
            total = len(self._stocks)
            if total == 0:
                return
            sel = self._valid_selection(total) or 0
            self._selected = max(0, sel - 1)

    def move_selection_down(self):
        with self._lock:
            total = len(self._stocks)
            if total == 0:
                return
            sel = self._valid_selection(total)
            self._selected = 0 if sel is None else min(total - 1, sel + 1)

    def select_by_position(self, row):
        """Select the stock drawn on screen ``row``; rows outside the list are ignored."""
        visible = row - LIST_TOP_ROW
        if visible < 0 or (self.list_rows and visible >= self.list_rows):
            return False
        index = self.list_offset + visible
        with self._lock:
            if index >= len(self._stocks):
                return False
            self._selected = index
        return True

    # --- refresh ---

    def refresh(self):
        """Dispatch one background fetch for every tracked code.

        Returns immediately. Overlapping refreshes are not coalesced; a result
        older than one already applied is discarded.
        """
        with self._lock:
            codes = [s.code for s in self._stocks]
            if not codes:
                return False
            self._generation += 1
            generation = self._generation
        log.debug("Refresh #%d for %s", generation, ",".join(codes))
        self._spawn(self._fetch_worker, codes, generation)
        return True

    def _fetch_worker(self, codes, generation):
        try:
            quotes = self._fetcher(codes)
        except QuoteError as e:
            log.warning("Refresh #%d failed: %s", generation, e)
            self.apply_failure(str(e), generation)
            return
        self.apply_quotes(quotes, generation)

    def _accepts(self, generation):
        # Caller holds the lock.
        if self._closed or generation < self._applied_generation:
            return False
        self._applied_generation = generation
        return True

    def apply_quotes(self, quotes, generation=None):
        """Write a successful fetch back. Stocks missing from ``quotes`` keep their values."""
        with self._lock:
            if generation is not None and not self._accepts(generation):
                log.debug("Dropping stale refresh #%s", generation)
                return False
            for stock in self._stocks:
                quote = quotes.get(stock.code)
                if quote is not None:
                    stock.apply(quote)
            self._last_error = ""
            self._last_refresh = datetime.now()
        return True

    def apply_failure(self, message, generation=None):
        with self._lock:
            if generation is not None and not self._accepts(generation):
                return False
            self._last_error = message
        return True

    # --- timer ---

    def tick(self):
        """One timer tick. Every REFRESH_EVERY_TICKS-th tick refreshes in Normal mode."""
        self.tick_count += 1
        if self.tick_count % REFRESH_EVERY_TICKS == 0 and isinstance(self.mode, Normal):
            return self.refresh()
        return False
