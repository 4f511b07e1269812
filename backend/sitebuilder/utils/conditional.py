from datetime import timezone

from dateutil.parser import ParserError, parse
from flask import request


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def not_modified_since(last_modified) -> bool:
    """
    True when the If-Modified-Since header covers last_modified.

    HTTP dates have second resolution, so sub-second parts are dropped before
    comparing. An unparseable header is ignored rather than rejected.
    """
    if last_modified is None:
        return False

    client_ts = request.headers.get("If-Modified-Since")
    if not client_ts:
        return False

    try:
        client_ts = normalize_ts(parse(client_ts))
    except (ParserError, ValueError, OverflowError):
        return False

    server_ts = normalize_ts(last_modified).replace(microsecond=0)
    return server_ts <= client_ts
