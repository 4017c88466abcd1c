import logging
import threading
import warnings
from contextlib import contextmanager
from typing import Optional, Tuple, Union

import requests
from urllib3.exceptions import InsecureRequestWarning, LocationParseError
from urllib3.util import parse_url

from pylametric.exceptions import InvalidHostURL

log = logging.getLogger(__name__)

# Local device API
DEVICE_PORT = 4343
NOTIFICATIONS_PATH = "/api/v1/dev/device/notifications"
API_KEY_HEADER = "X-Access-Token"

# Filter installed while at least one device request trusts the self-signed certificate
_INSECURE_FILTER = ("ignore", None, InsecureRequestWarning, None, 0)
_insecure_lock = threading.Lock()
_insecure_depth = 0


def build_url(ip: str) -> str:
    """
    Return the notifications endpoint of the device at ip.

    Raises InvalidHostURL if ip cannot be used as the host of that URL.
    """
    if not isinstance(ip, str) or not ip or any(c.isspace() for c in ip):
        raise InvalidHostURL(f"Invalid device address: {ip!r}")
    url = f"https://{ip}:{DEVICE_PORT}{NOTIFICATIONS_PATH}"
    try:
        parsed = parse_url(url)
    except LocationParseError as exc:
        raise InvalidHostURL(f"Invalid device address {ip!r}: {exc}") from exc
    if (parsed.host is None or parsed.host.lower() != ip.lower() or parsed.auth
            or parsed.port != DEVICE_PORT or parsed.path != NOTIFICATIONS_PATH
            or parsed.query or parsed.fragment):
        raise InvalidHostURL(f"Invalid device address: {ip!r}")
    return url


@contextmanager
def _silence_insecure_requests():
    global _insecure_depth
    with _insecure_lock:
        if _insecure_depth == 0:
            warnings.filters.insert(0, _INSECURE_FILTER)
        _insecure_depth += 1
    try:
        yield
    finally:
        with _insecure_lock:
            _insecure_depth -= 1
            if _insecure_depth == 0 and _INSECURE_FILTER in warnings.filters:
                # Only our entry goes, filters added meanwhile by others stay
                warnings.filters.remove(_INSECURE_FILTER)


class TransportPolicy:
    """
    How requests to the device are made.

    Args:
        verify       = TLS verification passed to requests. False (default) accepts the
                       self-signed certificate of the device, a path uses that CA bundle
        timeout      = Seconds for the timeout on http requests (or (connect, read) tuple)
        poolmaxsize  = Pool max size for http connection re-use (persistent
                       connections disabled if zero)

    The policy applies only to requests made through LaMetric.push(). The
    InsecureRequestWarning filter is installed while a device request is in
    flight and removed when the last concurrent request finishes.
    """

    def __init__(self, verify: Union[bool, str] = False, timeout: Union[int, Tuple[int, int]] = 5,
                 poolmaxsize: int = 10):
        self.verify = verify
        self.timeout = timeout
        self.poolmaxsize = poolmaxsize

    def __repr__(self):
        return (f"TransportPolicy(verify={self.verify!r}, timeout={self.timeout!r}, "
                f"poolmaxsize={self.poolmaxsize!r})")

    @property
    def trusts_self_signed(self) -> bool:
        return self.verify is False

    def create_session(self):
        if self.poolmaxsize > 0:
            # Create session object for http connection re-use
            session = requests.Session()
            # noinspection PyUnresolvedReferences
            a = requests.adapters.HTTPAdapter(pool_maxsize=self.poolmaxsize)
            session.mount('https://', a)
            return session
        # Disable http persistent connections
        return requests

    @contextmanager
    def scope(self):
        """Silence InsecureRequestWarning for the duration of one device request"""
        if not self.trusts_self_signed:
            yield
            return
        with _silence_insecure_requests():
            yield


DEFAULT_POLICY = TransportPolicy()


def post(session, url: str, body: str, api_key: str, policy: Optional[TransportPolicy] = None) -> requests.Response:
    """POST body to url with the api key header. Transport errors are raised unchanged."""
    policy = policy or DEFAULT_POLICY
    headers = {API_KEY_HEADER: api_key, "Content-Type": "application/json"}
    with policy.scope():
        try:
            r = session.post(url, data=body.encode("utf-8"), headers=headers,
                             verify=policy.verify, timeout=policy.timeout)
        except requests.exceptions.Timeout:
            log.debug('ERROR Timeout waiting for LaMetric API %s' % url)
            raise
        except requests.exceptions.ConnectionError:
            log.debug('ERROR Unable to connect to LaMetric at %s' % url)
            raise
    log.debug(f"{r.status_code} response from {url}: {r.text}")
    return r
