"""Exception types"""


class QuoteboardError(Exception):
    """Base class for every error raised by quoteboard."""


class QuoteError(QuoteboardError):
    """A refresh could not produce quotes."""


class TransportError(QuoteError):
    """Network unreachable, timeout or a non-2xx response."""


class ProtocolError(QuoteError):
    """The provider answered with a body we do not understand."""


class StorageError(QuoteboardError):
    """The code list could not be written to disk."""
