import base64

import pytest

from pylametric.config import Configuration, format_api_key
from pylametric.exceptions import InvalidHostURL
from pylametric.transport import TransportPolicy, build_url

RAW_KEY = "a" * 32 + "0123456789abcdef0123456789abcdef"


def test_raw_key_is_base64_encoded():
    assert len(RAW_KEY) == 64
    assert format_api_key(RAW_KEY) == base64.b64encode(RAW_KEY.encode()).decode()


@pytest.mark.parametrize("key", ["", "short", "a" * 63, "a" * 65, base64.b64encode(RAW_KEY.encode()).decode()])
def test_other_keys_pass_through(key):
    assert format_api_key(key) == key


def test_configuration():
    c = Configuration(RAW_KEY, "192.168.1.20")
    assert c.api_key == base64.b64encode(RAW_KEY.encode()).decode()
    assert c.ip_address == "192.168.1.20"
    assert RAW_KEY not in repr(c)
    assert c.api_key not in repr(c)


def test_build_url():
    assert build_url("192.168.1.20") == "https://192.168.1.20:4343/api/v1/dev/device/notifications"


@pytest.mark.parametrize("ip", ["", None, "10.0.0.1/x", "10.0.0.1:80", "user@10.0.0.1", "10.0.0.1?a=b",
                                "10.0.0.1#frag", "10.0 .0.1"])
def test_build_url_invalid(ip):
    with pytest.raises(InvalidHostURL):
        build_url(ip)


def test_policy_defaults_trust_self_signed():
    policy = TransportPolicy()
    assert policy.verify is False
    assert policy.trusts_self_signed is True
    assert TransportPolicy(verify="/etc/ssl/ca.pem").trusts_self_signed is False


def test_policy_session():
    import requests
    session = TransportPolicy(poolmaxsize=2).create_session()
    assert isinstance(session, requests.Session)
    assert TransportPolicy(poolmaxsize=0).create_session() is requests
