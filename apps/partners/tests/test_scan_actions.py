"""
Service layer tests for partner shop scanning.

Tests cover:
- The full donate, drop-off, pickup hand-off
- Rejected drop-offs
- Mode enforcement from the resolved scan state
- Shop staff checks
- Raw scanner input dispatch
- Shop statistics
"""

import json
import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone

from apps.exchanges.models import ClaimStatus, CollectedItemRecord
from apps.exchanges.services import submit_claim_request, approve_claim_request
from apps.listings.models import ListingStatus
from apps.listings.services import ListingNotFoundError
from apps.partners.models import PartnerShop, ScanEvent, ScanMode, ScanResult
from apps.partners.services import (
    IllegalScanActionError,
    ShopNotFoundError,
    ShopStaffRequiredError,
    get_shop_scan_history,
    get_shop_summary,
    process_scan,
    qr_claim_out,
    qr_dropoff_in,
    qr_view_item,
)
from apps.qrcodes.models import QRCode, QRCodeStatus, QRCodeType
from apps.qrcodes.services import (
    InvalidPayloadError,
    QRCodeAlreadyUsedError,
    QRCodeExpiredError,
    encode_payload,
)
from apps.rewards.services import balance


def drop_off(listing, shop, **kwargs):
    return qr_dropoff_in(item_id=listing.id, shop_id=shop.id, **kwargs)


def pick_up(listing, shop, **kwargs):
    return qr_claim_out(item_id=listing.id, shop_id=shop.id, **kwargs)


@pytest.mark.django_db
class TestHandOff:
    """Donate, drop off at a shop, pick up."""

    def test_full_exchange(self, listing, donor, collector, shop_staff, partner_shop):
        claim, created = submit_claim_request(item_id=listing.id, collector=collector)
        assert created

        claim = approve_claim_request(request_id=claim.id)
        codes = QRCode.objects.filter(claim_request=claim)
        donor_code = codes.get(code_type=QRCodeType.DONOR)
        collector_code = codes.get(code_type=QRCodeType.COLLECTOR)

        assert claim.status == ClaimStatus.APPROVED
        assert donor_code.transaction_id == collector_code.transaction_id
        assert {donor_code.status, collector_code.status} == {QRCodeStatus.ACTIVE}
        assert donor_code.expires_at == claim.decision_at + timedelta(hours=48)
        assert collector_code.expires_at == donor_code.expires_at

        dropoff = drop_off(
            listing, partner_shop,
            qr_payload=encode_payload(donor_code),
            scanned_by=shop_staff,
        )
        donor_code.refresh_from_db()
        listing.refresh_from_db()

        assert dropoff.result == ScanResult.ACCEPTED
        assert dropoff.qr_code == donor_code
        assert donor_code.status == QRCodeStatus.SCANNED
        assert donor_code.scanned_at is not None
        assert listing.status == ListingStatus.AWAITING_COLLECTION

        pickup = pick_up(
            listing, partner_shop,
            qr_payload=encode_payload(collector_code),
            scanned_by=shop_staff,
        )
        collector_code.refresh_from_db()
        claim.refresh_from_db()
        listing.refresh_from_db()

        assert pickup.result == ScanResult.RELEASED
        assert pickup.claim_request == claim
        assert collector_code.status == QRCodeStatus.COMPLETED
        assert collector_code.completed_at is not None
        assert claim.status == ClaimStatus.COMPLETED
        assert listing.status == ListingStatus.COLLECTED
        assert balance(donor.id) == 25
        assert CollectedItemRecord.objects.get(listing=listing).collected is True

    def test_dropoff_by_item_id_advances_claim_code(self, listing, partner_shop, donor_code):
        event = drop_off(listing, partner_shop)
        donor_code.refresh_from_db()

        assert event.qr_code == donor_code
        assert donor_code.status == QRCodeStatus.SCANNED

    def test_pickup_by_item_id_advances_claim_code(self, listing, partner_shop, collector_code):
        drop_off(listing, partner_shop)
        pick_up(listing, partner_shop)
        collector_code.refresh_from_db()

        assert collector_code.status == QRCodeStatus.COMPLETED

    def test_second_pickup_is_refused(self, listing, donor, partner_shop, approved_claim):
        drop_off(listing, partner_shop)
        pick_up(listing, partner_shop)

        with pytest.raises(IllegalScanActionError):
            pick_up(listing, partner_shop)

        assert balance(donor.id) == 25
        assert ScanEvent.objects.filter(mode=ScanMode.PICKUP).count() == 1

    def test_reused_donor_code(self, listing, partner_shop, donor_code):
        payload = encode_payload(donor_code)
        drop_off(listing, partner_shop, qr_payload=payload)

        # Back to a drop-off state so only the code itself is stale
        listing.status = ListingStatus.PENDING_DROPOFF
        listing.save()

        with pytest.raises(QRCodeAlreadyUsedError):
            drop_off(listing, partner_shop, qr_payload=payload)

    def test_expired_donor_code_leaves_item_untouched(self, listing, partner_shop, donor_code):
        QRCode.objects.filter(pk=donor_code.pk).update(
            expires_at=timezone.now() - timedelta(minutes=1)
        )

        with pytest.raises(QRCodeExpiredError):
            drop_off(listing, partner_shop, qr_payload=encode_payload(donor_code))

        listing.refresh_from_db()
        assert listing.status == ListingStatus.PENDING_DROPOFF
        assert not ScanEvent.objects.exists()

    def test_claim_for_another_item(self, listing, partner_shop, approved_claim, exchange_listing, other_collector):
        other, _ = submit_claim_request(item_id=exchange_listing.id, collector=other_collector)
        drop_off(listing, partner_shop)

        with pytest.raises(IllegalScanActionError):
            pick_up(listing, partner_shop, claim_id=other.id)

    def test_pickup_without_approved_claim(self, listing, partner_shop):
        drop_off(listing, partner_shop)

        with pytest.raises(IllegalScanActionError):
            pick_up(listing, partner_shop)


@pytest.mark.django_db
class TestDropoffRules:

    def test_reject_requires_reason(self, listing, partner_shop):
        with pytest.raises(IllegalScanActionError):
            drop_off(listing, partner_shop, action='reject', reason='  ')

    def test_reject_records_only(self, listing, partner_shop, donor_code):
        event = drop_off(listing, partner_shop, action='reject', reason='Broken shelf')
        listing.refresh_from_db()
        donor_code.refresh_from_db()

        assert event.result == ScanResult.REJECTED
        assert event.reason == 'Broken shelf'
        assert listing.status == ListingStatus.PENDING_DROPOFF
        assert donor_code.status == QRCodeStatus.ACTIVE

    def test_unknown_action(self, listing, partner_shop):
        with pytest.raises(IllegalScanActionError):
            drop_off(listing, partner_shop, action='maybe')

    def test_dropoff_without_claim(self, listing, partner_shop):
        event = drop_off(listing, partner_shop, staff_name='Sam', notes='Back room')
        listing.refresh_from_db()

        assert event.qr_code is None
        assert event.claim_request is None
        assert event.co2_impact == Decimal('12.50')
        assert listing.status == ListingStatus.AWAITING_COLLECTION

    def test_pickup_before_dropoff(self, listing, partner_shop, approved_claim):
        with pytest.raises(IllegalScanActionError):
            pick_up(listing, partner_shop)

    def test_dropoff_after_dropoff_with_claim(self, listing, partner_shop, approved_claim):
        drop_off(listing, partner_shop)

        with pytest.raises(IllegalScanActionError):
            drop_off(listing, partner_shop)

    def test_exchange_item_cannot_be_dropped_off(self, exchange_listing, partner_shop):
        with pytest.raises(IllegalScanActionError):
            drop_off(exchange_listing, partner_shop)

    def test_unknown_item(self, partner_shop):
        with pytest.raises(ListingNotFoundError):
            qr_dropoff_in(item_id='3f1c2d4e-5a6b-4c7d-8e9f-0a1b2c3d4e5f', shop_id=partner_shop.id)


@pytest.mark.django_db
class TestShopStaff:

    def test_outsider_cannot_scan(self, listing, partner_shop, outsider):
        with pytest.raises(ShopStaffRequiredError):
            drop_off(listing, partner_shop, scanned_by=outsider)

        assert not ScanEvent.objects.exists()

    def test_site_staff_can_scan_any_shop(self, listing, partner_shop, outsider):
        outsider.is_staff = True
        outsider.save()

        event = drop_off(listing, partner_shop, scanned_by=outsider)

        assert event.scanned_by == outsider

    def test_unknown_shop(self, listing):
        with pytest.raises(ShopNotFoundError):
            qr_dropoff_in(item_id=listing.id, shop_id='3f1c2d4e-5a6b-4c7d-8e9f-0a1b2c3d4e5f')

    def test_inactive_shop(self, listing, partner_shop):
        PartnerShop.objects.filter(pk=partner_shop.pk).update(is_active=False)

        with pytest.raises(ShopNotFoundError):
            drop_off(listing, partner_shop)


@pytest.mark.django_db
class TestProcessScan:

    def test_item_label_resolves_dropoff(self, listing, partner_shop, donor_code):
        event = process_scan(raw=f'QR:ITEM:{listing.id}', shop_id=partner_shop.id)

        assert event.mode == ScanMode.DROPOFF
        assert event.result == ScanResult.ACCEPTED

    def test_collector_payload_resolves_pickup(self, listing, partner_shop, collector_code):
        drop_off(listing, partner_shop)

        event = process_scan(raw=encode_payload(collector_code), shop_id=partner_shop.id)

        assert event.mode == ScanMode.PICKUP
        assert event.result == ScanResult.RELEASED

    def test_code_must_match_resolved_mode(self, listing, partner_shop, collector_code):
        with pytest.raises(IllegalScanActionError):
            process_scan(raw=encode_payload(collector_code), shop_id=partner_shop.id)

    def test_reject_through_scanner(self, listing, partner_shop):
        event = process_scan(
            raw=str(listing.id).upper(),
            shop_id=partner_shop.id,
            action='reject',
            reason='Not accepted',
        )

        assert event.result == ScanResult.REJECTED

    def test_indeterminate_item(self, exchange_listing, partner_shop):
        with pytest.raises(IllegalScanActionError):
            process_scan(raw=str(exchange_listing.id), shop_id=partner_shop.id)

    def test_unreadable_input(self, partner_shop):
        with pytest.raises(InvalidPayloadError):
            process_scan(raw='hello', shop_id=partner_shop.id)

    def test_json_payload_without_item_id(self, partner_shop, donor):
        raw = json.dumps({'transactionId': 'TC1', 'type': 'donor', 'userId': str(donor.id)})

        with pytest.raises(InvalidPayloadError):
            process_scan(raw=raw, shop_id=partner_shop.id)


@pytest.mark.django_db
class TestViewItemAndStatistics:

    def test_view_item(self, listing, partner_shop, approved_claim):
        drop_off(listing, partner_shop)

        view = qr_view_item(listing.id)

        assert view.status == ListingStatus.AWAITING_COLLECTION
        assert view.claim == approved_claim
        assert view.scan_state.action_mode == ScanMode.PICKUP
        assert len(view.scan_events) == 1

    def test_view_item_history_limit(self, listing, partner_shop):
        for _ in range(3):
            drop_off(listing, partner_shop, action='reject', reason='Damp')

        assert len(qr_view_item(listing.id, history_limit=2).scan_events) == 2

    def test_view_item_zero_history_limit(self, listing, partner_shop):
        drop_off(listing, partner_shop, action='reject', reason='Damp')

        assert qr_view_item(listing.id, history_limit=0).scan_events == []

    def test_shop_summary(self, listing, partner_shop, approved_claim):
        drop_off(listing, partner_shop, action='reject', reason='Wobbly')
        drop_off(listing, partner_shop)
        pick_up(listing, partner_shop)

        summary = get_shop_summary(partner_shop.id)

        assert summary['total_scans'] == 2
        assert summary['dropoffs'] == 1
        assert summary['pickups'] == 1
        assert summary['rejected'] == 1
        assert summary['total_co2_kg'] == Decimal('25.00')
        assert summary['last_scanned_at'] is not None

    def test_empty_shop_summary(self, partner_shop):
        summary = get_shop_summary(partner_shop.id)

        assert summary['total_scans'] == 0
        assert summary['total_co2_kg'] == Decimal('0.00')
        assert summary['last_scanned_at'] is None

    def test_scan_history_newest_first(self, listing, partner_shop):
        first = drop_off(listing, partner_shop, action='reject', reason='Damp')
        ScanEvent.objects.filter(pk=first.pk).update(scanned_at=timezone.now() - timedelta(hours=1))
        second = drop_off(listing, partner_shop)

        history = list(get_shop_scan_history(partner_shop.id))

        assert [e.id for e in history] == [second.id, first.id]

    def test_scan_history_zero_limit(self, listing, partner_shop):
        drop_off(listing, partner_shop)

        assert list(get_shop_scan_history(partner_shop.id, limit=0)) == []
