"""limit-alarm entry point.

Usage:
    limit-alarm <command> [ARGS]

Commands:
    setup          One-time setup (installs hooks, writes config)
    uninstall      Remove hooks and clean up
    start <time>   Manual alarm (e.g. "4h", "30m", "90s", "120")
    stop           Dismiss the active alarm
    status         Check alarm status
    test           Play a test alarm
"""

import argparse
import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path

from . import __version__
from .config import get_log_path
from .config.loader import load_config
from .detection import format_duration
from .errors import AlarmAlreadyActiveError, InvalidDurationError


def setup_logging(level: str, log_file: Path | None = None) -> None:
    """Configure logging based on config.

    Background processes have no terminal, so they log to a file.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    kwargs: dict = {}
    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            kwargs["filename"] = str(log_file)
        except OSError:
            pass
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        **kwargs,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="limit-alarm",
        description="limit-alarm - Never miss your usage limit reset",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  limit-alarm setup          # One-time setup
  limit-alarm start 4h       # Manual: alarm in 4 hours
  limit-alarm start 30s      # Manual: alarm in 30 seconds
  limit-alarm stop           # Dismiss alarm

Environment:
  CLAUDE_ALARM_DIR         Config/state directory (default: ~/.claude-alarm)
  CLAUDE_ALARM_NTFY_TOPIC  Also push alerts to https://ntfy.sh/<topic>
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"limit-alarm v{__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    subparsers.add_parser("setup", help="One-time setup (installs hooks)")
    subparsers.add_parser("uninstall", help="Remove hooks and clean up")

    start = subparsers.add_parser("start", help='Manual alarm (e.g. "4h", "30m", "90s", "120")')
    start.add_argument("time", nargs="?", help="Time until the alarm")

    subparsers.add_parser("stop", help="Dismiss the active alarm")
    subparsers.add_parser("status", help="Check alarm status")
    subparsers.add_parser("test", help="Play a test alarm")

    # Internal: invoked by the assistant's hooks and by the launcher
    subparsers.add_parser("hook")
    daemon = subparsers.add_parser("daemon")
    daemon.add_argument("minutes", nargs="?", default=None)
    daemon.add_argument("--now", action="store_true", help="Fire once immediately")

    return parser


def cmd_start(time_arg: str | None) -> int:
    from .commands import start_alarm

    if not time_arg:
        print("\n  Usage: limit-alarm start <time>")
        print('  Examples: "4h", "30m", "90s", "240" (minutes)\n')
        return 1

    try:
        minutes = start_alarm(time_arg)
    except InvalidDurationError:
        print('\n  Invalid time. Use formats like "4h", "30m", "90s" or "240" (minutes).\n')
        return 1
    except AlarmAlreadyActiveError:
        print("\n  Alarm already active. Run 'limit-alarm stop' first.\n")
        return 1

    target = datetime.now() + timedelta(minutes=minutes)
    print(f"\n  Alarm set for {target:%H:%M} ({format_duration(minutes)} from now).")
    print("  Run 'limit-alarm stop' to cancel.\n")
    return 0


def cmd_stop() -> int:
    from .commands import stop_alarm

    result = stop_alarm()
    if result is None:
        print("\n  No active alarm.\n")
    elif result:
        print("\n  Alarm dismissed.\n")
    else:
        print("\n  Alarm was already stopped.\n")
    return 0


def cmd_status() -> int:
    from .commands import alarm_status

    pid = alarm_status()
    if pid is None:
        print("\n  No active alarm.\n")
        return 0

    print(f"\n  Alarm is active (PID: {pid}).")
    print("  Run 'limit-alarm stop' to dismiss.\n")
    return 0


def cmd_test() -> int:
    from .commands import fire_test_alarm

    print("\n  Playing test alarm...\n")
    return fire_test_alarm()


def cmd_setup() -> int:
    from .commands import fire_test_alarm, run_setup

    print("\n  limit-alarm setup\n")
    report = run_setup()

    print(f"  Detected: {report.platform.name.title()}")
    for line in report.capabilities:
        print(f"  {line}")
    print(f"  Config: {report.config_path}\n")

    print("  Installing hooks...")
    for event, added in report.hooks.items():
        if added:
            print(f"  + {event} hook added")
        else:
            print(f"  = {event} hook (already installed)")

    print("\n  Running test alarm...")
    fire_test_alarm()

    print("\n  Setup complete.")
    print("  You'll be alerted automatically when your limit resets.")
    print("  Run 'limit-alarm stop' to dismiss an active alarm.\n")
    return 0


def cmd_uninstall() -> int:
    from .commands import run_uninstall

    print("\n  limit-alarm uninstall\n")
    if run_uninstall():
        print("  Removed config directory")
    print("\n  Uninstalled. All hooks and config removed.\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for limit-alarm.

    Returns:
        Exit code (0 for success, 1 for invalid input or conflicting state)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # Config and log setup count against the hook deadline
    deadline = None
    if args.command == "hook":
        from .hook import arm_deadline

        deadline = arm_deadline()

    config = load_config()
    setup_logging(config.log_level, get_log_path())
    logger = logging.getLogger("limit_alarm")
    logger.debug(f"limit-alarm v{__version__}: {args.command}")

    if args.command == "hook":
        from .hook import run_hook

        return run_hook(config=config, deadline=deadline)

    if args.command == "daemon":
        from .scheduler import run_daemon

        return run_daemon(args.minutes, immediate=args.now, config=config)

    handlers = {
        "setup": cmd_setup,
        "uninstall": cmd_uninstall,
        "stop": cmd_stop,
        "status": cmd_status,
        "test": cmd_test,
    }

    if args.command == "start":
        return cmd_start(args.time)
    if args.command in handlers:
        return handlers[args.command]()

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
