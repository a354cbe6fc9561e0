import pytest
import requests

from loudstock.services.carrier import YalidineClient
from loudstock.services.errors import CarrierError, CarrierQuotaExceeded


class FakeResponse:
    def __init__(self, status_code=200, payload=None, headers=None):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, *responses):
        self.headers = {}
        self.responses = list(responses)
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def client(*responses, api_id="id", api_token="token"):
    session = FakeSession(*responses)
    return YalidineClient(api_id, api_token, min_interval=0, session=session), session


def test_fetches_product_list_from_envelope():
    yal, session = client(
        FakeResponse(200, {"data": [{"tracking": "YAL-1", "product_list": "2x Robe Ete (M)"}]})
    )

    parcel = yal.get_parcel("YAL-1")

    assert parcel.tracking == "YAL-1"
    assert parcel.product_list == "2x Robe Ete (M)"
    assert session.urls == ["https://api.yalidine.app/v1/parcels/YAL-1"]
    assert session.headers["X-API-ID"] == "id"
    assert session.headers["X-API-TOKEN"] == "token"


def test_tracking_is_url_quoted():
    yal, session = client(FakeResponse(200, {"tracking": "A:B/1", "product_list": "1x Sac"}))

    assert yal.get_parcel("A:B/1").product_list == "1x Sac"
    assert session.urls[0].endswith("/parcels/A%3AB%2F1")


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(404, {"message": "not found"}),
        FakeResponse(500, None),
        FakeResponse(200, {"data": []}),
        requests.ConnectionError("down"),
    ],
)
def test_lookup_failures(response):
    yal, _ = client(response)
    with pytest.raises(CarrierError):
        yal.get_parcel("YAL-1")


def test_quota_rejections():
    yal, _ = client(FakeResponse(429, {"message": "Too many requests"}))
    with pytest.raises(CarrierQuotaExceeded):
        yal.get_parcel("YAL-1")

    yal, _ = client(FakeResponse(200, {"message": "Daily quota exceeded"}))
    with pytest.raises(CarrierQuotaExceeded):
        yal.get_parcel("YAL-1")


def test_low_day_quota_blocks_next_call():
    yal, session = client(
        FakeResponse(
            200,
            {"data": [{"tracking": "YAL-1", "product_list": "1x Sac"}]},
            headers={"day-quota-left": "5", "minute-quota-left": "40"},
        )
    )
    yal.get_parcel("YAL-1")

    assert yal.quota_left["day"] == 5
    assert yal.quota_left["minute"] == 40
    with pytest.raises(CarrierQuotaExceeded):
        yal.get_parcel("YAL-2")
    assert len(session.urls) == 1


def test_unconfigured_client_never_calls_out():
    yal, session = client(api_id=None, api_token=None)

    assert not yal.is_configured()
    with pytest.raises(CarrierError):
        yal.get_parcel("YAL-1")
    assert session.urls == []
