# pyLaMetric Module
# -*- coding: utf-8 -*-
"""
 Python module to push notifications to a LaMetric smart display on the local network

 Features
    * Typed notification model: simple, goal and chart frames, icons, sounds, priority
    * Compose frame lists from small producers with optional, either and repeat blocks
    * Image icons downscaled to the 8x8 display (requires Pillow)
    * One HTTPS request per push, using the device's self-signed certificate
    * Will re-use http connections to the device for reduced load and faster response times

 Classes
    LaMetric(configuration, policy, session)
    Configuration(api_key, ip_address)
    TransportPolicy(verify, timeout, poolmaxsize)
    Notification(frames, sound, cycles, priority, icon_type, lifetime)

 Parameters
    api_key                   # Device API key, raw (64 characters) or base64 encoded
    ip_address                # IPv4 address of the device
    verify = False            # TLS verification (False accepts the device's self-signed certificate)
    timeout = 5               # Timeout for HTTPS calls in seconds
    poolmaxsize = 10          # Pool max size for http connection re-use (persistent
                                connections disabled if zero)

 Functions
    push(notification)        # Send notification to the device, return PushResponse
    payload(notification)     # Return the JSON body push() would send
    url()                     # Return the notifications endpoint of the device
    close_session()           # Release pooled http connections

 Requirements
    This module requires the following modules: requests
    Image icons also require Pillow: pip install pylametric[image]
"""
import logging
import sys
from typing import Optional

import requests

version_tuple = (0, 1, 0)
version = __version__ = '%d.%d.%d' % version_tuple

from pylametric.config import Configuration, format_api_key
from pylametric.exceptions import (DecodeError, DeviceRejected, ImageEncodingFailed, InvalidHostURL,
                                   LaMetricError)
from pylametric.frames import EMPTY, FrameBuilder, chart, compose, either, goal, optional, repeat, simple
from pylametric.image import IMAGE_SUPPORT
from pylametric.model import (DEFAULT_ICON, Alarm, AlarmSound, ChartFrame, GoalFrame, IconType, IdentifiedIcon,
                              Model, Notice, NoticeSound, Notification, Priority, SimpleFrame, StaticImageIcon)
from pylametric.response import Failure, PushResponse, Success, decode_push_response
from pylametric.transport import DEFAULT_POLICY, TransportPolicy, build_url, post

log = logging.getLogger(__name__)
log.debug('%s version %s', __name__, __version__)
log.debug('Python %s on %s', sys.version, sys.platform)


def set_debug(toggle=True, color=True):
    """Enable verbose logging"""
    if toggle:
        if color:
            logging.basicConfig(format='\x1b[31;1m%(levelname)s:%(message)s\x1b[0m', level=logging.DEBUG)
        else:
            logging.basicConfig(format='%(levelname)s:%(message)s', level=logging.DEBUG)
        log.setLevel(logging.DEBUG)
        log.debug("%s [%s]\n" % (__name__, __version__))
    else:
        log.setLevel(logging.NOTSET)


class LaMetric(object):
    def __init__(self, configuration: Configuration, policy: Optional[TransportPolicy] = None, session=None):
        """
        Represents a LaMetric device on the local network.

        Args:
            configuration = Configuration with the device API key and IP address
            policy        = TransportPolicy for requests to the device (default accepts
                            the device's self-signed certificate)
            session       = requests.Session to use instead of one created from policy
        """
        self.configuration = configuration
        self.policy = policy or DEFAULT_POLICY
        self.session = session if session is not None else self.policy.create_session()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close_session()

    def url(self) -> str:
        return build_url(self.configuration.ip_address)

    def payload(self, notification: Notification) -> str:
        """Return the JSON body that push() sends for notification"""
        return notification.to_json()

    def push(self, notification: Notification) -> PushResponse:
        """
        Send notification to the device.

        Returns a PushResponse: result is Success(id) when the device accepted the
        notification, Failure(messages) when it rejected it.

        Raises:
            InvalidHostURL: the configured address cannot be used
            ImageEncodingFailed: an image icon could not be encoded (nothing is sent)
            DecodeError: the device reply is not a known response
            requests.exceptions.RequestException: transport failure, not retried
        """
        url = self.url()
        body = self.payload(notification)
        log.debug(f"Pushing {len(notification.frames)} frame(s) to {url}")
        r = post(self.session, url, body, self.configuration.api_key, self.policy)
        try:
            response = decode_push_response(r.content)
        except DecodeError:
            log.error(f"Unexpected response from LaMetric at {url} (status code {r.status_code})")
            raise
        if response.ok:
            log.debug(f"Notification {response.id} accepted")
        else:
            log.debug(f"Notification rejected: {'; '.join(response.messages)}")
        return response

    def close_session(self):
        if self.session is not requests:
            self.session.close()
