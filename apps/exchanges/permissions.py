from rest_framework import permissions


class IsClaimDonor(permissions.BasePermission):
    """
    Permission: User must be the donor of the requested item.
    """

    def has_object_permission(self, request, view, obj):
        # obj is a ClaimRequest instance
        return obj.donor_id == request.user.id


class IsClaimParty(permissions.BasePermission):
    """
    Permission: User must be the donor or the collector of the request.
    """

    def has_object_permission(self, request, view, obj):
        # obj is a ClaimRequest instance
        return request.user.id in (obj.donor_id, obj.collector_id)
