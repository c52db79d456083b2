from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from .models import Player
from .serializers import PlayerSerializer, PlayerFilterSerializer
from .permissions import IsRosterOwner
from .services import (
    create_player,
    update_player,
    delete_player,
    search_players,
    PlayerNotFoundError,
)
from .exceptions import PlayerNotFoundAPIError


class PlayerPagination(PageNumberPagination):
    """Roster pagination; squads rarely exceed one page."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


@extend_schema(tags=['players'])
class PlayerViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the organiser's roster.

    list: Get roster (filterable by search term and regular flag)
    create: Add a player
    retrieve: Get a player
    update: Update a player (including base balance)
    destroy: Delete a player and their payment records
    """

    queryset = Player.objects.all()
    serializer_class = PlayerSerializer
    permission_classes = [IsAuthenticated, IsRosterOwner]
    pagination_class = PlayerPagination

    def get_queryset(self):
        """Scope to the organiser and apply validated filters."""
        if self.action != 'list':
            return Player.objects.filter(owner=self.request.user)

        filter_serializer = PlayerFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        return search_players(
            owner=self.request.user,
            search=params.get('search', ''),
            regular=params.get('regular'),
        )

    @extend_schema(parameters=[
        OpenApiParameter('search', str, description='Name, nickname or mobile'),
        OpenApiParameter('regular', bool, description='Regular players only'),
    ])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def perform_create(self, serializer):
        serializer.instance = create_player(
            owner=self.request.user,
            **serializer.validated_data
        )

    def perform_update(self, serializer):
        try:
            serializer.instance = update_player(
                owner=self.request.user,
                player_id=serializer.instance.id,
                **serializer.validated_data
            )
        except PlayerNotFoundError:
            raise PlayerNotFoundAPIError()

    def perform_destroy(self, instance):
        try:
            delete_player(owner=self.request.user, player_id=instance.id)
        except PlayerNotFoundError:
            raise PlayerNotFoundAPIError()
