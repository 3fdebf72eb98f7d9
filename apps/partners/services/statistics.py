"""
Shop scanning statistics.

Feeds the shop dashboard: recent scans and running totals.
"""

from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

from django.db.models import Count, Q, QuerySet, Sum

from apps.exchanges import conf
from apps.partners.models import ScanEvent, ScanMode, ScanResult

SUCCESSFUL_RESULTS = (ScanResult.ACCEPTED, ScanResult.RELEASED)


def get_shop_scan_history(shop_id: UUID, limit: Optional[int] = None) -> QuerySet:
    """Most recent scans at a shop, newest first."""
    if limit is None:
        limit = conf.scan_history_limit()
    return (
        ScanEvent.objects
        .select_related('listing', 'claim_request', 'qr_code')
        .filter(shop_id=shop_id)
        .order_by('-scanned_at')[:limit]
    )


def get_shop_summary(shop_id: UUID) -> Dict[str, Any]:
    """
    Totals for a shop.

    Drop-offs and pickups count successful scans only; rejected drop-offs
    are reported separately. ``total_co2_kg`` sums the CO2 impact of every
    successful scan.

    Returns:
        Dict with total_scans, dropoffs, pickups, rejected, total_co2_kg,
        last_scanned_at
    """
    events = ScanEvent.objects.filter(shop_id=shop_id)
    successful = Q(result__in=SUCCESSFUL_RESULTS)

    stats = events.aggregate(
        total_scans=Count('id', filter=successful),
        dropoffs=Count('id', filter=successful & Q(mode=ScanMode.DROPOFF)),
        pickups=Count('id', filter=successful & Q(mode=ScanMode.PICKUP)),
        rejected=Count('id', filter=Q(result=ScanResult.REJECTED)),
        total_co2_kg=Sum('co2_impact', filter=successful),
    )

    latest = events.order_by('-scanned_at').values_list('scanned_at', flat=True).first()

    return {
        'total_scans': stats['total_scans'],
        'dropoffs': stats['dropoffs'],
        'pickups': stats['pickups'],
        'rejected': stats['rejected'],
        'total_co2_kg': stats['total_co2_kg'] or Decimal('0.00'),
        'last_scanned_at': latest,
    }
