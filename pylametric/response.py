import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from pylametric.exceptions import DecodeError, DeviceRejected

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Success:
    id: str


@dataclass(frozen=True)
class Failure:
    messages: Tuple[str, ...]


@dataclass(frozen=True)
class PushResponse:
    """Outcome of a push: result is Success(id) or Failure(messages)"""
    result: Union[Success, Failure]

    @property
    def ok(self) -> bool:
        return isinstance(self.result, Success)

    @property
    def id(self) -> Optional[str]:
        return self.result.id if self.ok else None

    @property
    def messages(self) -> Tuple[str, ...]:
        return () if self.ok else self.result.messages

    def raise_for_errors(self) -> "PushResponse":
        """Raise DeviceRejected for a Failure, otherwise return self"""
        if not self.ok:
            raise DeviceRejected(self.result.messages)
        return self


def _load(body: Union[bytes, str, dict]) -> Any:
    if isinstance(body, dict):
        return body
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"Response is not UTF-8: {exc}") from exc
    try:
        return json.loads(body)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"Unable to parse response '{body}' as JSON: {exc}") from exc


def decode_push_response(body: Union[bytes, str, dict]) -> PushResponse:
    """
    Decode the device reply to a push.

    The errors key is checked before the success key: a reply carrying both is
    decoded as a Failure. A present but empty errors list is still a Failure.

    Raises:
        DecodeError: the reply is not a JSON object with an errors or success key
    """
    data = _load(body)
    if not isinstance(data, dict):
        raise DecodeError(f"Unknown response: {data!r}")

    if "errors" in data:
        errors = data["errors"]
        if not isinstance(errors, list):
            raise DecodeError(f"Malformed errors in response: {errors!r}")
        messages = []
        for err in errors:
            if not isinstance(err, dict) or not isinstance(err.get("message"), str):
                raise DecodeError(f"Malformed error entry in response: {err!r}")
            messages.append(err["message"])
        log.debug(f"Push rejected by device: {messages}")
        return PushResponse(Failure(tuple(messages)))

    if "success" in data:
        success = data["success"]
        if not isinstance(success, dict) or not isinstance(success.get("id"), str):
            raise DecodeError(f"Malformed success in response: {success!r}")
        return PushResponse(Success(success["id"]))

    raise DecodeError(f"Unknown response: {data!r}")
