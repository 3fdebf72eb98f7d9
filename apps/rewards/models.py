from django.db import models
import uuid


class RewardAccount(models.Model):
    """GreenPoints balance of a donor."""

    donor = models.OneToOneField(
        'accounts.User',
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='reward_account'
    )
    balance = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reward_accounts'

    def __str__(self):
        return f"{self.donor} - {self.balance} pts"


class RewardCredit(models.Model):
    """
    One ledger credit.

    The unique claim_request column guarantees a completed claim is paid
    out at most once; manual credits leave it empty.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    donor = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='reward_credits'
    )
    points = models.PositiveIntegerField()
    claim_request = models.OneToOneField(
        'exchanges.ClaimRequest',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='reward_credit'
    )
    reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'reward_credits'
        indexes = [
            models.Index(fields=['donor', '-created_at'], name='reward_credits_donor_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"+{self.points} for {self.donor}"
