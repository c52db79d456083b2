from django.http import JsonResponse
from rest_framework import status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiParameter
from .serializers import (
    MatchInputSerializer,
    MatchUpdateSerializer,
    RecordPaymentInputSerializer,
    SettleInputSerializer,
    OutstandingInputSerializer,
    LedgerFilterSerializer,
    LedgerImportSerializer,
    MatchRecordSerializer,
    PaymentRecordSerializer,
    WeekendRecordSerializer,
    WeekendListSerializer,
    LedgerRowSerializer,
    LedgerSummarySerializer,
)
from .services import (
    get_current_weekend,
    get_weekend,
    list_weekends,
    advance_weekend,
    save_match,
    update_match,
    delete_match,
    record_payment,
    toggle_payment,
    settle_player,
    set_outstanding,
    get_ledger_summary,
    get_player_row,
    export_filename,
    export_ledger,
    import_ledger,
    reset_ledger,
    WeekendNotFoundError,
    MatchNotFoundError,
    PaymentNotFoundError,
    PlayerNotInLedgerError,
    UnknownParticipantError,
    InvalidMatchError,
    InvalidAppDataError,
)
from .exceptions import (
    WeekendNotFoundAPIError,
    MatchNotFoundAPIError,
    PaymentNotFoundAPIError,
    PlayerNotInLedgerAPIError,
    InvalidMatchAPIError,
    InvalidLedgerDataAPIError,
)

UUID_PATTERN = r'[0-9a-fA-F-]{36}'


def _summary_response(summary):
    serializer = LedgerSummarySerializer(
        summary,
        context={'current_weekend_id': summary.weekend.id if summary.is_current else None},
    )
    return Response(serializer.data)


def _match_kwargs(validated_data):
    data = dict(validated_data)
    data['match_date'] = data.pop('date', None)
    return data


@extend_schema(tags=['weekends'])
class WeekendViewSet(viewsets.ViewSet):
    """
    Weekends of the organiser's ledger.

    list: All weekends, most recent first
    retrieve: One weekend with its matches and payments
    current: The current weekend
    advance: Start the next weekend
    summary: Ledger rows for a weekend
    matches: Create or edit a match in a weekend
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    @extend_schema(responses={200: WeekendListSerializer(many=True)})
    def list(self, request):
        weekends = list_weekends(owner=request.user)
        current = get_current_weekend(owner=request.user)
        serializer = WeekendListSerializer(
            weekends, many=True, context={'current_weekend_id': current.id}
        )
        return Response(serializer.data)

    @extend_schema(responses={200: WeekendRecordSerializer})
    def retrieve(self, request, pk=None):
        try:
            weekend = get_weekend(owner=request.user, weekend_id=pk)
        except WeekendNotFoundError:
            raise WeekendNotFoundAPIError()

        current = get_current_weekend(owner=request.user)
        serializer = WeekendRecordSerializer(
            weekend, context={'current_weekend_id': current.id}
        )
        return Response(serializer.data)

    @extend_schema(responses={200: WeekendRecordSerializer})
    @action(detail=False, methods=['get'])
    def current(self, request):
        weekend = get_current_weekend(owner=request.user)
        serializer = WeekendRecordSerializer(
            weekend, context={'current_weekend_id': weekend.id}
        )
        return Response(serializer.data)

    @extend_schema(
        request=None,
        responses={201: WeekendRecordSerializer},
        description="Start the weekend seven days after the current one.",
    )
    @action(detail=False, methods=['post'])
    def advance(self, request):
        weekend = advance_weekend(owner=request.user)
        serializer = WeekendRecordSerializer(
            weekend, context={'current_weekend_id': weekend.id}
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[OpenApiParameter('search', str, description='Name, nickname or mobile')],
        responses={200: LedgerSummarySerializer},
    )
    @action(detail=True, methods=['get'])
    def summary(self, request, pk=None):
        filter_serializer = LedgerFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        try:
            summary = get_ledger_summary(
                owner=request.user,
                weekend_id=pk,
                search=filter_serializer.validated_data.get('search', ''),
            )
        except WeekendNotFoundError:
            raise WeekendNotFoundAPIError()

        return _summary_response(summary)

    @extend_schema(
        request=MatchInputSerializer,
        responses={201: MatchRecordSerializer},
        description=(
            "Create or edit a match. Saturday and Sunday are single slots; "
            "saving one again edits it and keeps the amounts already paid."
        ),
    )
    @action(detail=True, methods=['post'])
    def matches(self, request, pk=None):
        serializer = MatchInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            match = save_match(
                owner=request.user,
                weekend_id=pk,
                **_match_kwargs(serializer.validated_data)
            )
        except WeekendNotFoundError:
            raise WeekendNotFoundAPIError()
        except UnknownParticipantError as e:
            raise InvalidMatchAPIError(detail=str(e))

        return Response(MatchRecordSerializer(match).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=['matches'])
class MatchViewSet(viewsets.ViewSet):
    """
    Matches by id.

    update: Edit costs, participants, club or date (rebuilds payments)
    destroy: Delete the match and its payments
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    @extend_schema(request=MatchUpdateSerializer, responses={200: MatchRecordSerializer})
    def update(self, request, pk=None):
        serializer = MatchUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            match = update_match(
                owner=request.user,
                match_id=pk,
                **_match_kwargs(serializer.validated_data)
            )
        except MatchNotFoundError:
            raise MatchNotFoundAPIError()
        except (UnknownParticipantError, InvalidMatchError) as e:
            raise InvalidMatchAPIError(detail=str(e))

        return Response(MatchRecordSerializer(match).data)

    @extend_schema(responses={204: None})
    def destroy(self, request, pk=None):
        try:
            delete_match(owner=request.user, match_id=pk)
        except MatchNotFoundError:
            raise MatchNotFoundAPIError()

        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=['payments'])
class PaymentViewSet(viewsets.ViewSet):
    """
    Single payments.

    record: Set the amount paid
    toggle: Switch between fully paid and unpaid
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    @extend_schema(request=RecordPaymentInputSerializer, responses={200: PaymentRecordSerializer})
    @action(detail=True, methods=['post'])
    def record(self, request, pk=None):
        serializer = RecordPaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = record_payment(
                owner=request.user,
                payment_id=pk,
                amount_paid=serializer.validated_data['amount_paid'],
            )
        except PaymentNotFoundError:
            raise PaymentNotFoundAPIError()

        return Response(PaymentRecordSerializer(payment).data)

    @extend_schema(request=None, responses={200: PaymentRecordSerializer})
    @action(detail=True, methods=['post'])
    def toggle(self, request, pk=None):
        try:
            payment = toggle_payment(owner=request.user, payment_id=pk)
        except PaymentNotFoundError:
            raise PaymentNotFoundAPIError()

        return Response(PaymentRecordSerializer(payment).data)


@extend_schema(tags=['ledger'])
class PlayerLedgerViewSet(viewsets.ViewSet):
    """
    Per-player ledger positions.

    retrieve: The player's row for a weekend (current by default)
    settle: Mark fully paid or unpaid for the current weekend
    outstanding: Override the current outstanding amount
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    @extend_schema(
        parameters=[OpenApiParameter('weekend', OpenApiTypes.UUID, description='Weekend ID')],
        responses={200: LedgerRowSerializer},
    )
    def retrieve(self, request, pk=None):
        filter_serializer = LedgerFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        try:
            row = get_player_row(
                owner=request.user,
                player_id=pk,
                weekend_id=filter_serializer.validated_data.get('weekend'),
            )
        except WeekendNotFoundError:
            raise WeekendNotFoundAPIError()

        if row is None:
            raise PlayerNotInLedgerAPIError()

        return Response(LedgerRowSerializer(row).data)

    @extend_schema(
        request=SettleInputSerializer,
        responses={200: LedgerRowSerializer},
        description=(
            "Mark every current payment paid (base balance reset to 0) or "
            "unpaid (base balance set to the current balance). Omit 'paid' "
            "to toggle."
        ),
    )
    @action(detail=True, methods=['post'])
    def settle(self, request, pk=None):
        serializer = SettleInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            row = settle_player(
                owner=request.user,
                player_id=pk,
                paid=serializer.validated_data.get('paid'),
            )
        except PlayerNotInLedgerError:
            raise PlayerNotInLedgerAPIError()

        return Response(LedgerRowSerializer(row).data)

    @extend_schema(request=OutstandingInputSerializer, responses={200: LedgerRowSerializer})
    @action(detail=True, methods=['post'])
    def outstanding(self, request, pk=None):
        serializer = OutstandingInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            row = set_outstanding(
                owner=request.user,
                player_id=pk,
                outstanding=serializer.validated_data['outstanding'],
            )
        except PlayerNotInLedgerError:
            raise PlayerNotInLedgerAPIError()

        return Response(LedgerRowSerializer(row).data)


@extend_schema(
    parameters=[OpenApiParameter('search', str, description='Name, nickname or mobile')],
    responses={200: LedgerSummarySerializer},
    description="Ledger rows and totals for the current weekend.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def ledger_summary(request):
    filter_serializer = LedgerFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)

    summary = get_ledger_summary(
        owner=request.user,
        search=filter_serializer.validated_data.get('search', ''),
    )
    return _summary_response(summary)


@extend_schema(
    responses={200: OpenApiTypes.OBJECT},
    description="Download the whole ledger as a JSON file.",
    tags=['data'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def export_data(request):
    response = JsonResponse(export_ledger(owner=request.user))
    response['Content-Disposition'] = f'attachment; filename="{export_filename()}"'
    return response


@extend_schema(
    request=LedgerImportSerializer,
    responses={200: OpenApiTypes.OBJECT},
    description="Replace the whole ledger with an exported JSON file.",
    tags=['data'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def import_data(request):
    try:
        data = import_ledger(owner=request.user, payload=request.data)
    except InvalidAppDataError as e:
        raise InvalidLedgerDataAPIError(detail=str(e))

    return Response({
        'message': 'Import successful',
        'players': len(data.players),
        'weekends': len(data.weekends),
        'current_weekend_id': data.current_weekend_id,
    })


@extend_schema(
    request=None,
    responses={200: OpenApiTypes.OBJECT},
    description="Delete every player and weekend and start a fresh ledger.",
    tags=['data'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def reset_data(request):
    data = reset_ledger(owner=request.user)
    return Response({
        'message': 'Ledger reset',
        'current_weekend_id': data.current_weekend_id,
    })
