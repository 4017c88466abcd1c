# Example: pyLaMetric Usage Demo
# -------------------------------
# This script pushes a few notifications to a LaMetric device on the local network.
#
# Usage:
#   - Set your device address and API key below, or use a .env file with the following variables:
#       LAMETRIC_HOST, LAMETRIC_API_KEY
#   - Run: python example.py

import os

import dotenv

import pylametric
from pylametric import (Configuration, IconType, IdentifiedIcon, LaMetric, Notice, NoticeSound, Notification,
                        Priority, SimpleFrame, chart, either, goal, optional, repeat, simple)

# Load environment variables from .env file if present
dotenv.load_dotenv()

# Enable debug logging for more verbose output (optional for learning)
# pylametric.set_debug(True)

host = os.getenv('LAMETRIC_HOST', "192.168.1.20")   # Address of your LaMetric
api_key = os.getenv('LAMETRIC_API_KEY', "")           # Device API key (developer.lametric.com)

lm = LaMetric(Configuration(api_key, host))

print(f"pyLaMetric version: {pylametric.__version__}")
print(f"Device endpoint: {lm.url()}")

# Option 1 - Explicit frame list
note = Notification(
    frames=[SimpleFrame("Hello from pyLaMetric", IdentifiedIcon(2867))],
    sound=NoticeSound(Notice.POSITIVE1),
)

# Option 2 - Composed frames
battery = 64
charging = True
low_battery = battery < 20
report = Notification.compose(
    simple("Battery", IdentifiedIcon(389, animated=True)),
    goal(battery, (0, 100), "%"),
    either(charging, simple("Charging"), simple("On battery")),
    optional(low_battery, simple("Plug me in!")),
    repeat(chart(10, 30, 20, 60, 64), 2),
    priority=Priority.INFO,
    icon_type=IconType.INFO,
    cycles=1,
)

print("Payload:")
print(lm.payload(report))

for n in (note, report):
    response = lm.push(n)
    if response.ok:
        print(f"Sent notification {response.id}")
    else:
        print(f"Rejected: {', '.join(response.messages)}")

lm.close_session()
