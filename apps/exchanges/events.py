"""
Exchange event bus.

Each topic is a Django signal. Publishing defers delivery to
``transaction.on_commit``, so subscribers only hear about transitions that
were actually committed; outside a transaction delivery is immediate.
Subscribers run in subscription order. A subscriber that raises is logged
and skipped; it never fails the publisher or starves later subscribers.

Receivers follow the Django convention ``handler(sender, **kwargs)`` and
get the topic name as ``topic`` plus the payload keywords:

    claim.requested       claim_request
    claim.approved        claim_request, chat_id
    collection.confirmed  claim_request, reward_points
    partner.ready         claim_request, qr_codes
"""

import logging

from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)


class Topic:
    CLAIM_REQUESTED = 'claim.requested'
    CLAIM_APPROVED = 'claim.approved'
    COLLECTION_CONFIRMED = 'collection.confirmed'
    PARTNER_READY = 'partner.ready'

    ALL = (CLAIM_REQUESTED, CLAIM_APPROVED, COLLECTION_CONFIRMED, PARTNER_READY)


claim_requested = Signal()
claim_approved = Signal()
collection_confirmed = Signal()
partner_ready = Signal()


class UnknownTopicError(LookupError):
    """Raised when subscribing or publishing to a topic that doesn't exist."""
    pass


class ExchangeEventBus:
    """In-process publish/subscribe over a fixed set of signal-backed topics."""

    def __init__(self, signals=None):
        self._signals = signals or {
            Topic.CLAIM_REQUESTED: claim_requested,
            Topic.CLAIM_APPROVED: claim_approved,
            Topic.COLLECTION_CONFIRMED: collection_confirmed,
            Topic.PARTNER_READY: partner_ready,
        }

    def signal_for(self, topic: str) -> Signal:
        try:
            return self._signals[topic]
        except KeyError:
            raise UnknownTopicError(f"Unknown exchange event topic '{topic}'")

    def subscribe(self, topic: str, handler) -> None:
        """Register ``handler``; subscribing the same handler twice is a no-op."""
        self.signal_for(topic).connect(handler, weak=False)

    def unsubscribe(self, topic: str, handler) -> bool:
        return self.signal_for(topic).disconnect(handler)

    def publish(self, topic: str, **payload) -> None:
        signal = self.signal_for(topic)
        transaction.on_commit(lambda: self._deliver(topic, signal, payload))

    def _deliver(self, topic, signal, payload):
        responses = signal.send_robust(sender=self.__class__, topic=topic, **payload)
        for receiver, response in responses:
            if isinstance(response, Exception):
                logger.error(
                    'event_subscriber_failed',
                    exc_info=(type(response), response, response.__traceback__),
                    extra={'extra': {
                        'event': 'event_subscriber_failed',
                        'topic': topic,
                        'subscriber': getattr(receiver, '__qualname__', repr(receiver)),
                    }},
                )


bus = ExchangeEventBus()

subscribe = bus.subscribe
unsubscribe = bus.unsubscribe
publish = bus.publish


def log_exchange_event(sender, topic=None, claim_request=None, **kwargs):
    """Audit subscriber connected to every topic at startup."""
    logger.info(
        'exchange_event',
        extra={'extra': {
            'event': 'exchange_event',
            'topic': topic,
            'request_id': str(claim_request.id) if claim_request is not None else None,
            'item_id': str(claim_request.listing_id) if claim_request is not None else None,
        }},
    )
