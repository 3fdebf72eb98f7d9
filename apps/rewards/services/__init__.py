"""Reward ledger services."""

from .exceptions import (
    InvalidRewardAmountError,
    DuplicateRewardCreditError,
)
from .ledger import (
    credit,
    balance,
    credit_history,
)

__all__ = [
    'InvalidRewardAmountError',
    'DuplicateRewardCreditError',
    'credit',
    'balance',
    'credit_history',
]
