from decimal import Decimal
import uuid

from django.db import models
from django.utils import timezone


class PartnerShop(models.Model):
    """Charity shop where donors drop items off and collectors pick them up."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    address_line = models.CharField(max_length=255, blank=True)
    postcode = models.CharField(max_length=12, blank=True)
    is_active = models.BooleanField(default=True)

    # Users allowed to scan codes for this shop
    staff = models.ManyToManyField(
        'accounts.User',
        related_name='partner_shops',
        blank=True
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'partner_shops'
        ordering = ['name']

    def __str__(self):
        return self.name

    def has_staff_member(self, user):
        return self.staff.filter(pk=user.pk).exists()


class ScanMode(models.TextChoices):
    DROPOFF = 'dropoff', 'Drop-off'
    PICKUP = 'pickup', 'Pickup'


class ScanResult(models.TextChoices):
    ACCEPTED = 'accepted', 'Accepted'
    REJECTED = 'rejected', 'Rejected'
    RELEASED = 'released', 'Released'


class ScanEvent(models.Model):
    """
    One confirmed shop scan.

    Drop-offs are accepted or rejected; pickups release the item to its
    collector. Rows are append-only.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.ForeignKey(
        PartnerShop,
        on_delete=models.PROTECT,
        related_name='scan_events'
    )
    listing = models.ForeignKey(
        'listings.Listing',
        on_delete=models.CASCADE,
        related_name='scan_events'
    )
    claim_request = models.ForeignKey(
        'exchanges.ClaimRequest',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='scan_events'
    )
    qr_code = models.ForeignKey(
        'qrcodes.QRCode',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='scan_events'
    )

    mode = models.CharField(max_length=10, choices=ScanMode.choices)
    result = models.CharField(max_length=10, choices=ScanResult.choices)
    reason = models.CharField(max_length=255, blank=True)

    staff_name = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)
    co2_impact = models.DecimalField(max_digits=8, decimal_places=2, default=Decimal('0.00'))

    scanned_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='scan_events'
    )
    scanned_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'scan_events'
        indexes = [
            models.Index(fields=['shop', '-scanned_at'], name='scan_events_shop_idx'),
            models.Index(fields=['listing', '-scanned_at'], name='scan_events_listing_idx'),
        ]
        ordering = ['-scanned_at']

    def __str__(self):
        return f"{self.shop} {self.mode} {self.result} ({self.listing_id})"
