"""Exchange settings with their defaults, read at call time."""

from datetime import timedelta

from django.conf import settings


def qr_pair_ttl() -> timedelta:
    """Lifetime of the donor/collector pair minted on approval."""
    return timedelta(hours=getattr(settings, 'EXCHANGE_QR_PAIR_TTL_HOURS', 48))


def qr_standalone_ttl() -> timedelta:
    """Lifetime of a donor-generated code with no claim behind it."""
    return timedelta(hours=getattr(settings, 'EXCHANGE_QR_STANDALONE_TTL_HOURS', 24))


def default_reward_points() -> int:
    return getattr(settings, 'EXCHANGE_DEFAULT_REWARD_POINTS', 25)


def scan_history_limit() -> int:
    return getattr(settings, 'EXCHANGE_SCAN_HISTORY_LIMIT', 25)
