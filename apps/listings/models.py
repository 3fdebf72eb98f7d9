from decimal import Decimal
import uuid

from django.core.validators import MinValueValidator
from django.db import models


class PickupOption(models.TextChoices):
    DONATE = 'donate', 'Donate'
    EXCHANGE = 'exchange', 'Exchange'
    RECYCLE = 'recycle', 'Recycle'


class ListingStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    PENDING_DROPOFF = 'pending_dropoff', 'Pending drop-off'
    CLAIMED = 'claimed', 'Claimed'
    AWAITING_COLLECTION = 'awaiting_collection', 'Awaiting collection'
    COLLECTED = 'collected', 'Collected'


class Listing(models.Model):
    """An item a donor has listed for hand-off."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    donor = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='listings'
    )

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=100, default='Other')
    condition = models.CharField(max_length=50, blank=True)
    image_url = models.URLField(blank=True)

    # Kilograms of CO2 kept out of landfill by re-use
    co2_impact = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    pickup_option = models.CharField(
        max_length=20,
        choices=PickupOption.choices,
        default=PickupOption.DONATE
    )
    status = models.CharField(
        max_length=30,
        choices=ListingStatus.choices,
        default=ListingStatus.ACTIVE
    )
    drop_off_location = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'listings'
        indexes = [
            models.Index(fields=['donor', 'status'], name='listings_donor_status_idx'),
            models.Index(fields=['status'], name='listings_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} ({self.status})"

    @property
    def is_donation(self):
        return self.pickup_option == PickupOption.DONATE
