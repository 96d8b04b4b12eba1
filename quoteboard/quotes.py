"""Quote fetching and response parsing"""
import json
import logging

import requests

from .config import QUOTE_URL, QUOTE_PREFIX, QUOTE_SUFFIX, HTTP_TIMEOUT, SERVER_ERROR
from .errors import TransportError, ProtocolError
from .stock import Quote

log = logging.getLogger(__name__)

_NUMERIC_FIELDS = ("price", "percent", "open", "yestclose", "high", "low")


def parse_quote_body(body):
    """Turn a ``_ntes_quote_callback({...});`` body into ``{code: Quote}``.

    Codes the provider did not recognise are simply absent from the result.
    """
    if not body.startswith(QUOTE_PREFIX):
        raise ProtocolError(SERVER_ERROR)

    inner = body[len(QUOTE_PREFIX):].rstrip()
    if inner.endswith(QUOTE_SUFFIX):
        inner = inner[:-len(QUOTE_SUFFIX)]
    elif inner.endswith(")"):
        inner = inner[:-1]

    try:
        data = json.loads(inner)
    except (ValueError, RecursionError) as e:
        raise ProtocolError(SERVER_ERROR) from e
    if not isinstance(data, dict):
        raise ProtocolError(SERVER_ERROR)

    quotes = {}
    for code, fields in data.items():
        quote = _to_quote(code, fields)
        if quote is not None:
            quotes[code] = quote
    return quotes


def _to_quote(code, fields):
    if not isinstance(fields, dict):
        log.warning("Skipping quote for %s: not an object", code)
        return None
    try:
        values = {k: float(fields.get(k, 0.0)) for k in _NUMERIC_FIELDS}
    except (TypeError, ValueError, OverflowError):
        log.warning("Skipping quote for %s: non-numeric field", code)
        return None
    name = fields.get("name")
    return Quote(name=name if isinstance(name, str) and name else code, **values)


def fetch_quotes(codes, session=None, timeout=HTTP_TIMEOUT):
    """One round trip to the provider for ``codes`` (a list snapshot).

    Raises TransportError or ProtocolError.
    """
    url = QUOTE_URL + ",".join(codes)
    http = session or requests
    try:
        resp = http.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise TransportError(str(e) or e.__class__.__name__) from e
    # the feed is UTF-8 whatever the Content-Type says
    body = resp.content.decode("utf-8", errors="replace")
    try:
        return parse_quote_body(body)
    except ProtocolError:
        raise
    except Exception as e:
        log.warning("Unparseable quote body: %r", e)
        raise ProtocolError(SERVER_ERROR) from e
