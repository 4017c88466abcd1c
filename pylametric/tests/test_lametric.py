import base64
import json
import warnings
from unittest.mock import MagicMock

import pytest
import requests
from urllib3.exceptions import InsecureRequestWarning

from pylametric import (Alarm, AlarmSound, Configuration, DecodeError, IdentifiedIcon, ImageEncodingFailed,
                        InvalidHostURL, LaMetric, Notification, Priority, SimpleFrame, StaticImageIcon,
                        TransportPolicy, simple, repeat)

RAW_KEY = "k" * 64
URL = "https://192.168.1.20:4343/api/v1/dev/device/notifications"


def make_response(body, status_code=200):
    r = MagicMock()
    r.status_code = status_code
    r.content = body if isinstance(body, bytes) else json.dumps(body).encode()
    r.text = r.content.decode("utf-8", "replace")
    return r


@pytest.fixture(name="session")
def fixture_session():
    session = MagicMock()
    session.post.return_value = make_response({"success": {"id": "17"}})
    return session


@pytest.fixture(name="lm")
def fixture_lametric(session):
    return LaMetric(Configuration(RAW_KEY, "192.168.1.20"), session=session)


def test_push_success(lm, session):
    n = Notification([SimpleFrame("Hello", IdentifiedIcon(2867))], sound=AlarmSound(Alarm.ALARM1),
                     priority=Priority.WARNING)
    response = lm.push(n)

    assert response.ok
    assert response.id == "17"
    session.post.assert_called_once()
    args, kwargs = session.post.call_args
    assert args[0] == URL
    assert kwargs["headers"]["X-Access-Token"] == base64.b64encode(RAW_KEY.encode()).decode()
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["verify"] is False
    assert kwargs["timeout"] == 5
    assert json.loads(kwargs["data"]) == n.to_dict()


def test_push_rejected(lm, session):
    session.post.return_value = make_response({"errors": [{"message": "Invalid cycles"}]}, status_code=400)
    response = lm.push(Notification([SimpleFrame("x")], cycles=-1))
    assert not response.ok
    assert response.messages == ("Invalid cycles",)


def test_push_unknown_response(lm, session):
    session.post.return_value = make_response(b"<html>Unauthorized</html>", status_code=401)
    with pytest.raises(DecodeError):
        lm.push(Notification([SimpleFrame("x")]))


def test_transport_errors_propagate(lm, session):
    session.post.side_effect = requests.exceptions.ConnectTimeout("timed out")
    with pytest.raises(requests.exceptions.ConnectTimeout):
        lm.push(Notification([SimpleFrame("x")]))
    assert session.post.call_count == 1


def test_invalid_host_is_not_sent(session):
    lm = LaMetric(Configuration("key", "10.0.0.1/bad"), session=session)
    with pytest.raises(InvalidHostURL):
        lm.push(Notification([SimpleFrame("x")]))
    session.post.assert_not_called()


def test_image_failure_is_not_sent(lm, session, monkeypatch):
    import pylametric.image
    monkeypatch.setattr(pylametric.image, "IMAGE_SUPPORT", False)
    with pytest.raises(ImageEncodingFailed):
        lm.push(Notification([SimpleFrame("x", StaticImageIcon(b"img"))]))
    session.post.assert_not_called()


def test_policy_is_used(session):
    policy = TransportPolicy(verify="/tmp/lametric-ca.pem", timeout=(2, 7))
    lm = LaMetric(Configuration("key", "192.168.1.20"), policy=policy, session=session)
    lm.push(Notification([SimpleFrame("x")]))
    kwargs = session.post.call_args.kwargs
    assert kwargs["verify"] == "/tmp/lametric-ca.pem"
    assert kwargs["timeout"] == (2, 7)
    assert kwargs["headers"]["X-Access-Token"] == "key"


def test_insecure_warning_is_scoped(lm, session):
    def post(*args, **kwargs):
        warnings.warn("Unverified HTTPS request", InsecureRequestWarning)
        return make_response({"success": {"id": "1"}})

    session.post.side_effect = post
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        lm.push(Notification([SimpleFrame("x")]))
        warnings.warn("outside", InsecureRequestWarning)
    assert [str(w.message) for w in caught] == ["outside"]


def test_insecure_warning_interleaved_requests():
    from pylametric.transport import _INSECURE_FILTER

    first, second = TransportPolicy().scope(), TransportPolicy().scope()
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        first.__enter__()
        second.__enter__()
        warnings.warn("during both", InsecureRequestWarning)
        first.__exit__(None, None, None)
        warnings.warn("during second", InsecureRequestWarning)
        second.__exit__(None, None, None)
        assert _INSECURE_FILTER not in warnings.filters
        warnings.warn("after both", InsecureRequestWarning)
    assert [str(w.message) for w in caught] == ["after both"]


def test_insecure_filter_keeps_other_filters():
    with warnings.catch_warnings():
        with TransportPolicy().scope():
            warnings.filterwarnings("error", message="added during request")
        with pytest.raises(UserWarning):
            warnings.warn("added during request")


def test_verified_policy_does_not_silence():
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        with TransportPolicy(verify="/tmp/lametric-ca.pem").scope():
            warnings.warn("verified", InsecureRequestWarning)
    assert [str(w.message) for w in caught] == ["verified"]


def test_payload_matches_composed(lm):
    explicit = Notification([SimpleFrame("x"), SimpleFrame("x")], cycles=1)
    composed = Notification.compose(repeat(simple("x"), 2), cycles=1)
    assert lm.payload(explicit) == lm.payload(composed)


def test_context_manager_closes_session(session):
    with LaMetric(Configuration("key", "192.168.1.20"), session=session) as lm:
        assert lm.url() == "https://192.168.1.20:4343/api/v1/dev/device/notifications"
    session.close.assert_called_once()


def test_default_session_created():
    lm = LaMetric(Configuration("key", "192.168.1.20"))
    assert isinstance(lm.session, requests.Session)
    lm.close_session()
