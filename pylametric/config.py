import base64
import logging

log = logging.getLogger(__name__)

# Length of the raw API key shown in the LaMetric developer portal
RAW_API_KEY_LENGTH = 64


def format_api_key(api_key: str) -> str:
    """Base64 encode a raw 64 character API key, pass anything else through"""
    if len(api_key) == RAW_API_KEY_LENGTH:
        return base64.b64encode(api_key.encode("utf-8")).decode("ascii")
    return api_key


class Configuration:
    """
    Device credentials.

    Args:
        api_key     = Device API key, raw (64 characters) or already base64 encoded
        ip_address  = IPv4 address of the device on the local network
    """

    def __init__(self, api_key: str, ip_address: str):
        self.api_key = format_api_key(api_key)
        self.ip_address = ip_address

    def __repr__(self):
        # never show the api key
        return f"Configuration(ip_address={self.ip_address!r})"

