from django.db import models
from django.db.models import Q
import uuid


class ClaimStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    DECLINED = 'declined', 'Declined'
    COMPLETED = 'completed', 'Completed'


class ClaimRequest(models.Model):
    """
    A collector's request to receive a listed item.

    Lifecycle: pending -> approved -> completed, or pending -> declined.
    Declined and completed are terminal. At most one request per item is
    ever approved; approving it declines the item's other pending requests.
    Rows are never deleted.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    listing = models.ForeignKey(
        'listings.Listing',
        on_delete=models.PROTECT,
        related_name='claim_requests'
    )
    item_title = models.CharField(max_length=200)

    donor = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='received_claim_requests'
    )
    donor_name = models.CharField(max_length=100, blank=True)
    collector = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='claim_requests'
    )
    collector_name = models.CharField(max_length=100, blank=True)

    note = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=ClaimStatus.choices,
        default=ClaimStatus.PENDING
    )

    created_at = models.DateTimeField(auto_now_add=True)
    decision_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'claim_requests'
        constraints = [
            models.UniqueConstraint(
                fields=['listing', 'collector'],
                condition=~Q(status='completed'),
                name='unique_open_claim_per_collector'
            ),
        ]
        indexes = [
            models.Index(fields=['listing', 'status'], name='claims_listing_status_idx'),
            models.Index(fields=['donor', 'status'], name='claims_donor_status_idx'),
            models.Index(fields=['collector', 'status'], name='claims_collector_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.collector_name or self.collector_id} -> {self.item_title} ({self.status})"

    @property
    def is_terminal(self):
        return self.status in (ClaimStatus.DECLINED, ClaimStatus.COMPLETED)


class CollectedItemRecord(models.Model):
    """Quick lookup of items whose hand-off has been confirmed."""

    listing = models.OneToOneField(
        'listings.Listing',
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='collection_record'
    )
    claim_request = models.ForeignKey(
        ClaimRequest,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    collected = models.BooleanField(default=False)
    confirmed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'collected_items'

    def __str__(self):
        return f"{self.listing_id} collected={self.collected}"
