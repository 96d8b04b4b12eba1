import json

import pytest
import requests

from quoteboard.config import SERVER_ERROR
from quoteboard.errors import ProtocolError, TransportError
from quoteboard.quotes import parse_quote_body, fetch_quotes


def wrap(obj):
    return "_ntes_quote_callback(" + json.dumps(obj) + ");"


class StubResponse:
    def __init__(self, text, status=200, content=None):
        self.text = text
        self.content = content if content is not None else text.encode("utf-8")
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


class StubSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        if self.error:
            raise self.error
        return self.response


def test_parse_well_formed_body():
    body = wrap({"0600000": {"name": "浦发银行", "price": 7.5, "percent": -0.012,
                             "open": 7.6, "yestclose": 7.59, "high": 7.7, "low": 7.4}})
    quotes = parse_quote_body(body)
    q = quotes["0600000"]
    assert q.name == "浦发银行"
    assert (q.price, q.percent, q.open, q.yestclose, q.high, q.low) == (7.5, -0.012, 7.6, 7.59, 7.7, 7.4)


def test_missing_fields_default():
    q = parse_quote_body(wrap({"1000001": {"price": 12}}))["1000001"]
    assert q.name == "1000001"
    assert q.price == 12.0
    assert q.high == 0.0


def test_bad_entry_does_not_sink_batch():
    quotes = parse_quote_body(wrap({"a": {"price": "n/a"}, "b": {"price": 1}, "c": []}))
    assert list(quotes) == ["b"]


def test_empty_object():
    assert parse_quote_body(wrap({})) == {}


@pytest.mark.parametrize("body", [
    "<html>502</html>",
    "",
    "_ntes_quote_callback(not json);",
    "_ntes_quote_callback([1, 2]);",
])
def test_malformed_body_is_protocol_error(body):
    with pytest.raises(ProtocolError) as exc:
        parse_quote_body(body)
    assert str(exc.value) == SERVER_ERROR


def test_fetch_joins_codes_into_url():
    session = StubSession(StubResponse(wrap({"0600000": {"price": 1}})))
    quotes = fetch_quotes(["0600000", "1000001"], session=session)
    assert session.urls[0].endswith("/0600000,1000001")
    assert "0600000" in quotes


def test_fetch_transport_error():
    session = StubSession(error=requests.ConnectionError("connection refused"))
    with pytest.raises(TransportError, match="connection refused"):
        fetch_quotes(["0600000"], session=session)


def test_fetch_http_status_is_transport_error():
    session = StubSession(StubResponse("", status=503))
    with pytest.raises(TransportError):
        fetch_quotes(["0600000"], session=session)


def test_number_too_large_for_float_skips_only_that_entry():
    body = '_ntes_quote_callback({"a": {"price": 1' + "0" * 400 + '}, "b": {"price": 2}});'
    quotes = parse_quote_body(body)
    assert list(quotes) == ["b"]
    assert quotes["b"].price == 2.0


def test_deeply_nested_body_is_protocol_error():
    body = "_ntes_quote_callback(" + "[" * 100000 + "]" * 100000 + ");"
    session = StubSession(StubResponse(body))
    with pytest.raises(ProtocolError):
        fetch_quotes(["a"], session=session)


def test_body_decoded_as_utf8_regardless_of_declared_charset():
    raw = wrap({"0600000": {"name": "浦发银行", "price": 7.5}}).encode("utf-8")
    # what requests would guess from a latin-1 Content-Type
    session = StubSession(StubResponse(raw.decode("latin-1"), content=raw))
    quotes = fetch_quotes(["0600000"], session=session)
    assert quotes["0600000"].name == "浦发银行"


def test_invalid_utf8_bytes_are_replaced():
    raw = b'_ntes_quote_callback({"a": {"name": "\xff\xfe", "price": 1}});'
    session = StubSession(StubResponse("", content=raw))
    quotes = fetch_quotes(["a"], session=session)
    assert quotes["a"].price == 1.0
    assert "�" in quotes["a"].name
