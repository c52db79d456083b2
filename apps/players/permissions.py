"""
Custom permission classes for players app.
"""
from rest_framework.permissions import BasePermission


class IsRosterOwner(BasePermission):
    """
    Permission to access a player.

    Allows access only to the organiser whose roster holds the player.

    Usage:
        class PlayerViewSet(viewsets.ModelViewSet):
            permission_classes = [IsAuthenticated, IsRosterOwner]
    """

    message = 'This player is not on your roster.'

    def has_object_permission(self, request, view, obj):
        return obj.owner_id == request.user.id
