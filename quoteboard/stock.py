"""Stock record and quote field-set"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Quote:
    """One code's fields as delivered by the quote provider."""
    name: str
    price: float = 0.0
    percent: float = 0.0
    open: float = 0.0
    yestclose: float = 0.0
    high: float = 0.0
    low: float = 0.0


@dataclass
class Stock:
    """A tracked instrument and its last-known quote.

    ``percent`` is a fraction (0.0123 means +1.23%).
    """
    code: str
    title: str = ""
    price: float = 0.0
    percent: float = 0.0
    open: float = 0.0
    yestclose: float = 0.0
    high: float = 0.0
    low: float = 0.0

    def __post_init__(self):
        if not self.title:
            self.title = self.code

    def apply(self, quote):
        """Overwrite every quote field at once. Caller holds the state lock."""
        self.title = quote.name or self.code
        self.price = quote.price
        self.percent = quote.percent
        self.open = quote.open
        self.yestclose = quote.yestclose
        self.high = quote.high
        self.low = quote.low

    def copy(self):
        return Stock(self.code, self.title, self.price, self.percent,
                     self.open, self.yestclose, self.high, self.low)
