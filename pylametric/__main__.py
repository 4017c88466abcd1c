# pyLaMetric Module - Command Line
# -*- coding: utf-8 -*-
"""
 Python module to push notifications to a LaMetric smart display on the local network

 Command Line:
    python -m pylametric push -text "Hello" -icon 2867
    python -m pylametric payload -text "Hello" -notice cat
    python -m pylametric version

 Environment (also read from a .env file):
    LAMETRIC_HOST        - IP address of the device
    LAMETRIC_API_KEY     - Device API key

"""

import argparse
import os
import sys

from dotenv import load_dotenv

# Modules
from pylametric import (LaMetric, Configuration, Notification, FrameBuilder, IdentifiedIcon, AlarmSound,
                        NoticeSound, Priority, IconType, TransportPolicy, LaMetricError, version, set_debug)

# Global Variables
load_dotenv()
host = os.getenv("LAMETRIC_HOST", "")
apikey = os.getenv("LAMETRIC_API_KEY", "")
timeout = 5


def add_notification_args(parser):
    parser.add_argument("-text", type=str, action="append", default=[],
                        help="Text frame (repeat for several frames)")
    parser.add_argument("-icon", type=int, default=0, help="Icon id for the frames [Default=0]")
    parser.add_argument("-animated", action="store_true", default=False, help="Icon id is an animated icon")
    parser.add_argument("-goal", nargs=4, metavar=("CURRENT", "START", "END", "UNIT"), default=None,
                        help="Goal frame")
    parser.add_argument("-chart", type=int, nargs="+", default=None, help="Chart frame data points")
    sound = parser.add_mutually_exclusive_group()
    sound.add_argument("-alarm", type=str, default=None, help="Alarm sound (e.g. alarm1)")
    sound.add_argument("-notice", type=str, default=None, help="Notification sound (e.g. cat)")
    parser.add_argument("-repeat", type=int, default=1,
                        help="Times to play the sound, 0 plays until dismissed [Default=1]")
    parser.add_argument("-priority", type=str, default=None, choices=[p.value for p in Priority],
                        help="Notification priority")
    parser.add_argument("-icontype", type=str, default=None, choices=[t.value for t in IconType],
                        help="Icon shown before the notification")
    parser.add_argument("-cycles", type=int, default=None,
                        help="Times to show the frames, 0 shows until dismissed")
    parser.add_argument("-lifetime", type=int, default=None, help="Milliseconds to keep in the device queue")


def build_notification(args) -> Notification:
    icon = IdentifiedIcon(args.icon, animated=args.animated)
    builder = FrameBuilder()
    for text in args.text:
        builder.simple(text, icon=icon)
    if args.goal:
        current, start, end, unit = args.goal
        try:
            current, start, end = int(current), int(start), int(end)
        except ValueError:
            raise ValueError(f"-goal needs whole numbers for CURRENT START END, "
                             f"got {current} {start} {end}") from None
        builder.goal(current, (start, end), unit, icon=icon)
    if args.chart:
        builder.chart(*args.chart)
    sound = None
    if args.alarm:
        sound = AlarmSound(args.alarm, args.repeat)
    elif args.notice:
        sound = NoticeSound(args.notice, args.repeat)
    return Notification.compose(
        builder,
        sound=sound,
        cycles=args.cycles,
        priority=Priority(args.priority) if args.priority else None,
        icon_type=IconType(args.icontype) if args.icontype else None,
        lifetime=args.lifetime,
    )


def checked_notification(args) -> Notification:
    """Build the notification or exit with an ERROR line for bad or missing frames"""
    try:
        notification = build_notification(args)
    except ValueError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)
    if not notification.frames:
        print("ERROR: Nothing to send - add -text, -goal or -chart.")
        sys.exit(1)
    return notification


# Setup parser and groups
p = argparse.ArgumentParser(prog="pyLaMetric", description=f"pyLaMetric Module v{version}")
subparsers = p.add_subparsers(dest="command", title='commands (run <command> -h to see usage information)',
                              required=True)

push_args = subparsers.add_parser("push", help='Push a notification to the device')
push_args.add_argument("-host", type=str, default=host, help="IP address of the device [env LAMETRIC_HOST]")
push_args.add_argument("-apikey", type=str, default=apikey, help="Device API key [env LAMETRIC_API_KEY]")
push_args.add_argument("-timeout", type=float, default=timeout,
                       help=f"Seconds to wait for the device [Default={timeout}]")
add_notification_args(push_args)

payload_args = subparsers.add_parser("payload", help='Print the JSON payload without sending it')
add_notification_args(payload_args)

version_args = subparsers.add_parser("version", help='Print version information')

# Add a global debug flag
p.add_argument("-debug", action="store_true", default=False, help="Enable debug output")

if len(sys.argv) == 1:
    p.print_help(sys.stderr)
    sys.exit(1)

# parse args
args = p.parse_args()
command = args.command

# Set Debug Mode
if args.debug:
    set_debug(True)

# Push Notification
if command == 'push':
    if not args.host or not args.apikey:
        print("ERROR: Set -host and -apikey or LAMETRIC_HOST and LAMETRIC_API_KEY.")
        sys.exit(1)
    notification = checked_notification(args)
    try:
        with LaMetric(Configuration(args.apikey, args.host), TransportPolicy(timeout=args.timeout)) as lm:
            response = lm.push(notification)
    except LaMetricError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)
    except Exception as exc:
        print(f"ERROR: Unable to reach LaMetric at {args.host}: {exc}")
        sys.exit(1)
    if response.ok:
        print(f"Notification {response.id} sent.")
    else:
        for message in response.messages:
            print(f"ERROR: {message}")
        sys.exit(1)

# Print Payload
elif command == 'payload':
    notification = checked_notification(args)
    try:
        print(notification.to_json())
    except LaMetricError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)

# Print Version
elif command == 'version':
    print("pyLaMetric [%s]" % version)
# Print Usage
else:
    p.print_help()
