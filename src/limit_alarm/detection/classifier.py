"""Rate-limit classification for hook event text.

Decides whether a blob of event text reports an exhausted usage quota.
"""

import re

# Separator between words is optional ("rate limit", "rate-limit", "ratelimit")
RATE_LIMIT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"rate.?limit", re.IGNORECASE),
    re.compile(r"usage.?limit", re.IGNORECASE),
    re.compile(r"limit.?reached", re.IGNORECASE),
    re.compile(r"limit.?exceeded", re.IGNORECASE),
    re.compile(r"too.?many.?requests", re.IGNORECASE),
    re.compile(r"\b429\b"),
    re.compile(r"quota.?exceeded", re.IGNORECASE),
    re.compile(r"token.?limit.?reached", re.IGNORECASE),
    re.compile(r"capacity.?limit", re.IGNORECASE),
    re.compile(r"over.?capacity", re.IGNORECASE),
    re.compile(r"cooldown.?period", re.IGNORECASE),
    re.compile(r"try.?again.?in\b", re.IGNORECASE),
)


def matched_indicator(text: str | None) -> str | None:
    """Return the first indicator pattern found in text.

    Args:
        text: Event text corpus.

    Returns:
        The matching pattern's source, or None if nothing matched.
    """
    if not text:
        return None

    for pattern in RATE_LIMIT_PATTERNS:
        if pattern.search(text):
            return pattern.pattern
    return None


def is_rate_limited(text: str | None) -> bool:
    """Check whether text contains a rate-limit indicator.

    Examples:
        >>> is_rate_limited("Claude usage limit reached")
        True
        >>> is_rate_limited("All tests passed")
        False
    """
    return matched_indicator(text) is not None


__all__ = ["RATE_LIMIT_PATTERNS", "is_rate_limited", "matched_indicator"]
