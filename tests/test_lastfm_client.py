import json

import pytest
import requests

from spopify.core import ExternalSourceUnavailable, RateLimited
from spopify.lastfm import LastFmTagSource


def _response(payload, status: int = 200, headers=None) -> requests.Response:
    r = requests.Response()
    r.status_code = status
    r.url = "https://ws.audioscrobbler.com/2.0/"
    r.headers.update(headers or {})
    r._content = json.dumps(payload).encode("utf-8")
    return r


class FakeSession:
    def __init__(self, response: requests.Response):
        self.response = response
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append(params)
        return self.response


def test_get_top_tags_filters_listening_tags_and_limits() -> None:
    payload = {
        "toptags": {
            "tag": [
                {"name": "indie pop", "count": 100},
                {"name": "seen live", "count": 90},
                {"name": "Synthpop", "count": 80},
                {"name": "indie pop", "count": 70},
                {"name": "female vocalists", "count": 60},
                {"name": "electronic", "count": 50},
            ]
        }
    }
    session = FakeSession(_response(payload))
    source = LastFmTagSource(api_key="key", max_tags=3, session=session)

    tags = source.get_top_tags("Some Artist")

    assert tags == ["indie pop", "Synthpop", "female vocalists"]
    assert session.calls[0]["method"] == "artist.gettoptags"
    assert session.calls[0]["artist"] == "Some Artist"


def test_get_top_tags_single_tag_object() -> None:
    session = FakeSession(_response({"toptags": {"tag": {"name": "jazz"}}}))

    assert LastFmTagSource(api_key="key", session=session).get_top_tags("A") == ["jazz"]


def test_get_top_tags_without_api_key_makes_no_call() -> None:
    session = FakeSession(_response({}))

    assert LastFmTagSource(api_key=None, session=session).get_top_tags("A") == []
    assert session.calls == []


def test_unknown_artist_yields_no_tags() -> None:
    session = FakeSession(_response({"error": 6, "message": "The artist you supplied could not be found"}))

    assert LastFmTagSource(api_key="key", session=session).get_top_tags("Nobody") == []


def test_rate_limit_errors_raise_rate_limited() -> None:
    source = LastFmTagSource(api_key="key", session=FakeSession(_response({"error": 29})))
    with pytest.raises(RateLimited):
        source.get_top_tags("A")

    source = LastFmTagSource(
        api_key="key",
        session=FakeSession(_response({}, status=429, headers={"Retry-After": "5"})),
    )
    with pytest.raises(RateLimited) as excinfo:
        source.get_top_tags("A")
    assert excinfo.value.retry_after == 5.0


def test_temporary_and_network_errors_raise_unavailable() -> None:
    source = LastFmTagSource(api_key="key", session=FakeSession(_response({"error": 16})))
    with pytest.raises(ExternalSourceUnavailable):
        source.get_top_tags("A")

    class BrokenSession:
        def get(self, *args, **kwargs):
            raise requests.ConnectionError("down")

    source = LastFmTagSource(api_key="key", session=BrokenSession())
    with pytest.raises(ExternalSourceUnavailable):
        source.get_top_tags("A")
