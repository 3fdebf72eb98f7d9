"""Tests for the exchange event bus."""

import logging
import pytest
from django.db import transaction
from django.dispatch import Signal

from apps.exchanges import events
from apps.exchanges.events import ExchangeEventBus, Topic, UnknownTopicError
from apps.exchanges.services import (
    approve_claim_request,
    complete_claim_request,
    submit_claim_request,
)


@pytest.fixture
def bus():
    """Isolated bus with its own signals."""
    return ExchangeEventBus(signals={topic: Signal() for topic in Topic.ALL})


@pytest.fixture
def recorder():
    """Subscribe a handler to every global topic and collect deliveries."""
    received = []

    def handler(sender, topic, **payload):
        payload.pop('signal', None)
        received.append((topic, payload))

    for topic in Topic.ALL:
        events.subscribe(topic, handler)
    yield received
    for topic in Topic.ALL:
        events.unsubscribe(topic, handler)


@pytest.mark.django_db
class TestExchangeEventBus:

    def test_delivered_after_commit(self, bus, django_capture_on_commit_callbacks):
        received = []
        bus.subscribe(Topic.CLAIM_REQUESTED, lambda sender, **kw: received.append(kw['claim_request']))

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            bus.publish(Topic.CLAIM_REQUESTED, claim_request='req-1')
            assert received == []

        assert len(callbacks) == 1
        assert received == ['req-1']

    def test_not_delivered_when_transaction_rolls_back(self, bus, django_capture_on_commit_callbacks):
        received = []
        bus.subscribe(Topic.CLAIM_APPROVED, lambda sender, **kw: received.append(kw))

        with django_capture_on_commit_callbacks(execute=True):
            with pytest.raises(RuntimeError):
                with transaction.atomic():
                    bus.publish(Topic.CLAIM_APPROVED, claim_request='req-1', chat_id=None)
                    raise RuntimeError('boom')

        assert received == []

    def test_subscribers_called_in_order(self, bus, django_capture_on_commit_callbacks):
        calls = []

        def first(sender, **kw):
            calls.append('first')

        def second(sender, **kw):
            calls.append('second')

        bus.subscribe(Topic.PARTNER_READY, first)
        bus.subscribe(Topic.PARTNER_READY, second)

        with django_capture_on_commit_callbacks(execute=True):
            bus.publish(Topic.PARTNER_READY, claim_request=None, qr_codes=())

        assert calls == ['first', 'second']

    def test_failing_subscriber_is_isolated(self, bus, caplog, django_capture_on_commit_callbacks):
        calls = []

        def broken(sender, **kw):
            raise ValueError('subscriber bug')

        def healthy(sender, **kw):
            calls.append(kw['reward_points'])

        bus.subscribe(Topic.COLLECTION_CONFIRMED, broken)
        bus.subscribe(Topic.COLLECTION_CONFIRMED, healthy)

        with caplog.at_level(logging.ERROR, logger='apps.exchanges.events'):
            with django_capture_on_commit_callbacks(execute=True):
                bus.publish(Topic.COLLECTION_CONFIRMED, claim_request=None, reward_points=25)

        assert calls == [25]
        assert any(record.message == 'event_subscriber_failed' for record in caplog.records)

    def test_unsubscribe(self, bus, django_capture_on_commit_callbacks):
        calls = []

        def handler(sender, **kw):
            calls.append(kw)

        bus.subscribe(Topic.CLAIM_REQUESTED, handler)
        assert bus.unsubscribe(Topic.CLAIM_REQUESTED, handler) is True

        with django_capture_on_commit_callbacks(execute=True):
            bus.publish(Topic.CLAIM_REQUESTED, claim_request=None)

        assert calls == []

    def test_unknown_topic(self, bus):
        with pytest.raises(UnknownTopicError):
            bus.publish('claim.exploded')
        with pytest.raises(UnknownTopicError):
            bus.subscribe('claim.exploded', lambda sender, **kw: None)


@pytest.mark.django_db
class TestLifecycleEvents:

    def test_submit_publishes_claim_requested(self, recorder, listing, collector, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            claim, _ = submit_claim_request(item_id=listing.id, collector=collector)

        assert recorder == [(Topic.CLAIM_REQUESTED, {'claim_request': claim})]

    def test_duplicate_submit_publishes_nothing(self, recorder, listing, collector, pending_claim,
                                                 django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            submit_claim_request(item_id=listing.id, collector=collector)

        assert recorder == []

    def test_approve_publishes_approval_and_partner_ready(self, recorder, pending_claim,
                                                          django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            approve_claim_request(request_id=pending_claim.id, chat_id='chat-7')

        topics = [topic for topic, _ in recorder]
        assert topics == [Topic.CLAIM_APPROVED, Topic.PARTNER_READY]
        assert recorder[0][1]['chat_id'] == 'chat-7'
        donor_qr, collector_qr = recorder[1][1]['qr_codes']
        assert donor_qr.transaction_id == collector_qr.transaction_id

    def test_completion_published_once(self, recorder, approved_claim, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            complete_claim_request(request_id=approved_claim.id)
            complete_claim_request(request_id=approved_claim.id)

        assert recorder == [
            (Topic.COLLECTION_CONFIRMED, {'claim_request': approved_claim, 'reward_points': 25}),
        ]
