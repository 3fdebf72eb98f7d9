from decimal import Decimal
import uuid

from django.db import models
from django.utils import timezone

from apps.listings.models import PickupOption


class QRCodeType(models.TextChoices):
    DONOR = 'donor', 'Donor'
    COLLECTOR = 'collector', 'Collector'


class QRCodeStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    SCANNED = 'scanned', 'Scanned'
    EXPIRED = 'expired', 'Expired'
    COMPLETED = 'completed', 'Completed'


LIVE_STATUSES = (QRCodeStatus.ACTIVE, QRCodeStatus.SCANNED)


class QRCode(models.Model):
    """
    Hand-off QR code held by a donor or a collector.

    Codes are minted in donor/collector pairs sharing one transaction_id
    when a claim is approved, or alone when a donor generates a drop-off
    code for a listing. Rows are never deleted; status only moves forward:
    active -> scanned -> completed, or active/scanned -> expired.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    transaction_id = models.CharField(max_length=40, db_index=True)
    code_type = models.CharField(max_length=10, choices=QRCodeType.choices)

    listing = models.ForeignKey(
        'listings.Listing',
        on_delete=models.CASCADE,
        related_name='qr_codes'
    )
    holder = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='qr_codes'
    )
    holder_name = models.CharField(max_length=100, blank=True)

    # Null for donor-generated standalone codes
    claim_request = models.ForeignKey(
        'exchanges.ClaimRequest',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='qr_codes'
    )

    # Listing metadata copied at issue time
    category = models.CharField(max_length=100, blank=True)
    condition = models.CharField(max_length=50, blank=True)
    co2_impact = models.DecimalField(max_digits=8, decimal_places=2, default=Decimal('0.00'))
    action_type = models.CharField(
        max_length=20,
        choices=PickupOption.choices,
        default=PickupOption.DONATE
    )
    drop_off_location = models.CharField(max_length=255, blank=True)

    status = models.CharField(
        max_length=20,
        choices=QRCodeStatus.choices,
        default=QRCodeStatus.ACTIVE
    )

    created_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField()
    scanned_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    superseded_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'qr_codes'
        indexes = [
            models.Index(fields=['transaction_id', 'code_type'], name='qr_codes_txn_type_idx'),
            models.Index(fields=['holder', 'status'], name='qr_codes_holder_status_idx'),
            models.Index(fields=['listing', 'status'], name='qr_codes_listing_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.transaction_id} [{self.code_type}] {self.status}"

    def is_expired(self, now=None):
        """True once ``now`` is past ``expires_at``, whatever the stored status."""
        now = now or timezone.now()
        return now > self.expires_at

    def effective_status(self, now=None):
        """Stored status, reporting live codes past their expiry as expired."""
        if self.status in LIVE_STATUSES and self.is_expired(now):
            return QRCodeStatus.EXPIRED
        return self.status
