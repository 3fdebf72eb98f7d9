"""Domain exceptions for the reward ledger."""
from rest_framework.exceptions import APIException


class InvalidRewardAmountError(APIException):
    """Credits must be zero or positive."""
    status_code = 400
    default_detail = 'Reward points must be zero or positive.'
    default_code = 'invalid_reward_amount'


class DuplicateRewardCreditError(APIException):
    """The claim request has already been credited."""
    status_code = 409
    default_detail = 'This exchange has already been rewarded.'
    default_code = 'duplicate_reward_credit'
