# pyLaMetric - Notification Model
# -*- coding: utf-8 -*-
"""
 Notification payload model for the LaMetric local device API

 Every value here is immutable and write-only: it is built by the caller,
 encoded once to the JSON body of a push and never decoded back.

 Frames
    SimpleFrame(text, icon)                       # Icon and a line of text
    GoalFrame(start, current, end, unit, icon)    # Progress towards a goal
    ChartFrame(points)                            # Bar chart of integers

 Icons
    IdentifiedIcon(id, animated)  # Icon from the LaMetric gallery, "i<id>" or "a<id>"
    StaticImageIcon(image)        # Pillow image, image bytes or path, sent as a PNG data URI

 Sounds
    AlarmSound(sound, repeat)     # category "alarms"
    NoticeSound(sound, repeat)    # category "notifications"

 Envelope
    Notification(frames, sound, cycles, priority, icon_type, lifetime)
    Notification.compose(*producers, ...)   # frames built with pylametric.frames
"""
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import pylametric.image
from pylametric.image import to_data_uri

log = logging.getLogger(__name__)


class Priority(str, Enum):
    """Priority of the message"""
    INFO = "info"          # Same level as app notifications, not shown over the screensaver
    WARNING = "warning"    # Interrupts info notifications
    CRITICAL = "critical"  # Interrupts everything and is shown over the screensaver


class IconType(str, Enum):
    """Nature of the notification, shown as an icon before the frames"""
    NONE = "none"
    INFO = "info"    # "i" icon
    ALERT = "alert"  # "!!!" icon


class Alarm(str, Enum):
    """Alarm sound catalog"""
    ALARM1 = "alarm1"
    ALARM2 = "alarm2"
    ALARM3 = "alarm3"
    ALARM4 = "alarm4"
    ALARM5 = "alarm5"
    ALARM6 = "alarm6"
    ALARM7 = "alarm7"
    ALARM8 = "alarm8"
    ALARM9 = "alarm9"
    ALARM10 = "alarm10"
    ALARM11 = "alarm11"
    ALARM12 = "alarm12"
    ALARM13 = "alarm13"


class Notice(str, Enum):
    """Notification sound catalog"""
    BICYCLE = "bicycle"
    CAR = "car"
    CASH = "cash"
    CAT = "cat"
    DOG = "dog"
    DOG2 = "dog2"
    ENERGY = "energy"
    KNOCK_KNOCK = "knock-knock"
    LETTER_EMAIL = "letter_email"
    LOSE1 = "lose1"
    LOSE2 = "lose2"
    NEGATIVE1 = "negative1"
    NEGATIVE2 = "negative2"
    NEGATIVE3 = "negative3"
    NEGATIVE4 = "negative4"
    NEGATIVE5 = "negative5"
    NOTIFICATION = "notification"
    NOTIFICATION2 = "notification2"
    NOTIFICATION3 = "notification3"
    NOTIFICATION4 = "notification4"
    OPEN_DOOR = "openDoor"
    POSITIVE1 = "positive1"
    POSITIVE2 = "positive2"
    POSITIVE3 = "positive3"
    POSITIVE4 = "positive4"
    POSITIVE5 = "positive5"
    POSITIVE6 = "positive6"
    STATISTIC = "statistic"
    THUNDER = "thunder"
    WATER1 = "water1"
    WATER2 = "water2"
    WIN = "win"
    WIN2 = "win2"
    WIND = "wind"
    WIND_SHORT = "wind_short"


# Icons

@dataclass(frozen=True)
class IdentifiedIcon:
    id: int
    animated: bool = False


@dataclass(frozen=True)
class StaticImageIcon:
    """
    Image icon, downscaled to at most 8x8 pixels when encoded.

    You will get better results from images that are already 8x8.
    """
    image: Any

    @classmethod
    def supported(cls) -> bool:
        """True when Pillow is installed and image icons can be encoded"""
        return pylametric.image.IMAGE_SUPPORT


Icon = Union[IdentifiedIcon, StaticImageIcon]

DEFAULT_ICON = IdentifiedIcon(0)


# Frames

@dataclass(frozen=True)
class SimpleFrame:
    text: Optional[str]
    icon: Icon = DEFAULT_ICON


@dataclass(frozen=True)
class GoalFrame:
    start: int
    current: int
    end: int
    unit: str
    icon: Icon = DEFAULT_ICON


@dataclass(frozen=True)
class ChartFrame:
    points: Tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "points", tuple(self.points))


Frame = Union[SimpleFrame, GoalFrame, ChartFrame]

FRAME_TYPES = (SimpleFrame, GoalFrame, ChartFrame)


# Sounds

@dataclass(frozen=True)
class AlarmSound:
    """Alarm sound. repeat=0 plays it until the notification is dismissed."""
    sound: Union[Alarm, str]
    repeat: int = 1


@dataclass(frozen=True)
class NoticeSound:
    """Notification sound. repeat=0 plays it until the notification is dismissed."""
    sound: Union[Notice, str]
    repeat: int = 1


Sound = Union[AlarmSound, NoticeSound]


def _value(item):
    return item.value if isinstance(item, Enum) else item


def encode_icon(icon: Icon) -> str:
    if isinstance(icon, IdentifiedIcon):
        return ("a%d" if icon.animated else "i%d") % icon.id
    if isinstance(icon, StaticImageIcon):
        return to_data_uri(icon.image)
    raise TypeError(f"Unsupported icon: {icon!r}")


def encode_frame(frame: Frame) -> Dict[str, Any]:
    if isinstance(frame, SimpleFrame):
        return {"icon": encode_icon(frame.icon), "text": frame.text}
    if isinstance(frame, GoalFrame):
        return {
            "icon": encode_icon(frame.icon),
            "goalData": {
                "start": frame.start,
                "current": frame.current,
                "end": frame.end,
                "unit": frame.unit,
            },
        }
    if isinstance(frame, ChartFrame):
        return {"chartData": list(frame.points)}
    raise TypeError(f"Unsupported frame: {frame!r}")


def encode_sound(sound: Sound) -> Dict[str, Any]:
    if isinstance(sound, AlarmSound):
        category = "alarms"
    elif isinstance(sound, NoticeSound):
        category = "notifications"
    else:
        raise TypeError(f"Unsupported sound: {sound!r}")
    return {"id": _value(sound.sound), "repeat": sound.repeat, "category": category}


# Envelope

@dataclass(frozen=True)
class Model:
    """Message structure: frames plus sound and number of cycles."""
    frames: Tuple[Frame, ...] = ()
    sound: Optional[Sound] = None
    # 0 keeps the notification on screen until dismissed, device default is 1
    cycles: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "frames", tuple(self.frames))

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"frames": [encode_frame(f) for f in self.frames]}
        if self.sound is not None:
            body["sound"] = encode_sound(self.sound)
        if self.cycles is not None:
            body["cycles"] = self.cycles
        return body


@dataclass(frozen=True, init=False)
class Notification:
    """
    A notification to push to the device.

    Args:
        frames    = Frames shown in order
        sound     = AlarmSound or NoticeSound played on display
        cycles    = Times the frames are shown (0 = until dismissed, device default 1)
        priority  = Priority (device default info)
        icon_type = IconType shown before the frames
        lifetime  = Milliseconds the notification may wait in the device queue
                    before it is dropped (device default 120000)

    Nothing is validated here, out of range values are rejected by the device.
    """
    model: Model
    priority: Optional[Priority] = None
    icon_type: Optional[IconType] = None
    lifetime: Optional[int] = None

    def __init__(self, frames: Iterable[Frame] = (), sound: Optional[Sound] = None,
                 cycles: Optional[int] = None, priority: Optional[Priority] = None,
                 icon_type: Optional[IconType] = None, lifetime: Optional[int] = None):
        object.__setattr__(self, "model", Model(frames, sound, cycles))
        object.__setattr__(self, "priority", priority)
        object.__setattr__(self, "icon_type", icon_type)
        object.__setattr__(self, "lifetime", lifetime)

    @classmethod
    def from_model(cls, model: Model, priority: Optional[Priority] = None,
                   icon_type: Optional[IconType] = None, lifetime: Optional[int] = None) -> "Notification":
        return cls(model.frames, model.sound, model.cycles, priority, icon_type, lifetime)

    @classmethod
    def compose(cls, *producers, sound: Optional[Sound] = None, cycles: Optional[int] = None,
                priority: Optional[Priority] = None, icon_type: Optional[IconType] = None,
                lifetime: Optional[int] = None) -> "Notification":
        """Build the frame list from producers (see pylametric.frames.compose)"""
        from pylametric.frames import compose
        return cls(compose(*producers), sound, cycles, priority, icon_type, lifetime)

    @property
    def frames(self) -> Tuple[Frame, ...]:
        return self.model.frames

    @property
    def sound(self) -> Optional[Sound]:
        return self.model.sound

    @property
    def cycles(self) -> Optional[int]:
        return self.model.cycles

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"model": self.model.to_dict()}
        if self.priority is not None:
            body["priority"] = _value(self.priority)
        if self.icon_type is not None:
            body["iconType"] = _value(self.icon_type)
        if self.lifetime is not None:
            body["lifetime"] = self.lifetime
        return body

    def to_json(self) -> str:
        payload = json.dumps(self.to_dict())
        log.debug(f"Notification payload: {payload}")
        return payload
