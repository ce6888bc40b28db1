"""limit-alarm - Never miss a usage limit reset.

limit-alarm watches hook events from a coding assistant and:
- Detects rate-limit / usage-limit messages
- Works out when the limit resets
- Fires a notification, chime and spoken alert at that time

The alarm runs as a detached background process, so it survives the
terminal closing and the machine going to sleep.

Usage:
    limit-alarm setup
    limit-alarm start 4h
    python -m limit_alarm status
"""

__version__ = "0.1.0"

from .config import AlarmConfig
from .config.loader import load_config

__all__ = [
    "AlarmConfig",
    "__version__",
    "load_config",
]
