import pytest

from quoteboard.errors import TransportError
from quoteboard.state import AppState
from quoteboard.stock import Quote


class FakeFetcher:
    """Stands in for fetch_quotes: records calls, returns canned quotes or raises."""

    def __init__(self, quotes=None, error=None):
        self.quotes = quotes or {}
        self.error = error
        self.calls = []

    def __call__(self, codes):
        self.calls.append(list(codes))
        if self.error:
            raise self.error
        return dict(self.quotes)


class DeferredSpawn:
    """Queues worker jobs so tests decide when (and in what order) they finish."""

    def __init__(self):
        self.jobs = []

    def __call__(self, target, *args):
        self.jobs.append((target, args))

    def run(self, index=0):
        target, args = self.jobs.pop(index)
        target(*args)

    def run_all(self):
        while self.jobs:
            self.run()


def run_now(target, *args):
    target(*args)


def quote(name, price, percent=0.01):
    return Quote(name=name, price=price, percent=percent, open=price - 1,
                 yestclose=price - 0.5, high=price + 1, low=price - 2)


@pytest.fixture
def db(tmp_path):
    return tmp_path / "stocks.json"


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def state(db, fetcher):
    return AppState(db_path=db, fetcher=fetcher, spawn=run_now)


@pytest.fixture
def make_state(db):
    def _make(codes=(), fetcher=None, spawn=run_now):
        s = AppState(db_path=db, fetcher=fetcher or FakeFetcher(), spawn=spawn)
        for code in codes:
            s.add_stock(code)
        return s
    return _make


@pytest.fixture
def failing_fetcher():
    return FakeFetcher(error=TransportError("connection refused"))
