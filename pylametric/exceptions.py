class LaMetricError(Exception):
    """Base class for all pylametric errors."""


class InvalidHostURL(LaMetricError):
    """The device address cannot be assembled into a request URL."""


class ImageEncodingFailed(LaMetricError):
    """An image icon could not be downscaled or re-encoded as PNG."""


class DecodeError(LaMetricError):
    """The device reply matched neither the success nor the errors shape."""


class DeviceRejected(LaMetricError):
    """The device answered with a structured errors response."""

    def __init__(self, messages):
        self.messages = list(messages)
        super().__init__("; ".join(self.messages) or "Notification rejected by device")
