from rest_framework import viewsets, mixins, status, serializers as drf_serializers
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiParameter
from apps.accounts.permissions import (
    CanReadLedger,
    CanRecordPayments,
    CanReadSales,
    CanCreateSales,
    CanReadPurchases,
    CanCreatePurchases,
)
from .conf import ledger_setting
from .models import CustomerSale, SupplierPurchase, Payment, PartyType
from .serializers import (
    SaleSerializer,
    PurchaseSerializer,
    SaleInputSerializer,
    PurchaseInputSerializer,
    OrderPaymentUpdateSerializer,
    PaymentInputSerializer,
    PaymentFilterSerializer,
    ReportFilterSerializer,
    PaymentSerializer,
    AllocationSerializer,
    AllocationResultSerializer,
    BalanceSheetSerializer,
    PartySummarySerializer,
    PartyReportSerializer,
)
from .services import (
    allocate_payment,
    create_sale,
    create_purchase,
    update_order_payment,
    get_balance_sheet,
    get_party_reports,
    get_party_report,
    InvalidAmountError,
    InvalidPartyError,
    NoOutstandingOrdersError,
    PersistenceFailureError,
    OrderNotFoundError,
    InvalidOrderError,
    LedgerServiceError,
)


# Response serializers for API documentation
class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class PersistenceFailureResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()
    rolled_back = drf_serializers.BooleanField()
    completed_allocations = AllocationSerializer(many=True)


class LedgerPagination(PageNumberPagination):
    """Pagination for order and payment lists."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 500


class OrderViewSet(mixins.ListModelMixin,
                   mixins.RetrieveModelMixin,
                   viewsets.GenericViewSet):
    """
    Shared list/create/payment-edit behaviour for sales and purchases.

    list: Orders newest first
    create: Record an order (total and status are computed)
    retrieve: Get one order
    payment: Overwrite the paid amount by hand
    """

    party_type = None
    input_serializer_class = None
    read_permission = None
    create_permission = None
    lookup_value_regex = '[0-9a-f-]{36}'
    pagination_class = LedgerPagination

    def get_permissions(self):
        """Use different permissions for different actions."""
        if self.action == 'create':
            return [self.create_permission()]
        elif self.action == 'payment':
            return [CanRecordPayments()]
        return [self.read_permission()]

    def get_queryset(self):
        return self.queryset.order_by('-date', '-created_at')

    def create(self, request, *args, **kwargs):
        serializer = self.input_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = self.perform_create(serializer.validated_data)
        except LedgerServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            self.get_serializer(order).data,
            status=status.HTTP_201_CREATED
        )

    def perform_create(self, data):
        raise NotImplementedError

    @extend_schema(request=OrderPaymentUpdateSerializer)
    @action(detail=True, methods=['patch'])
    def payment(self, request, pk=None):
        """
        Set the order's paid amount directly.

        PATCH /api/ledger/{sales|purchases}/{id}/payment/
        Body: {"paid_amount": "500.00", "notes": "optional"}
        """
        serializer = OrderPaymentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = update_order_payment(
                party_type=self.party_type,
                order_id=pk,
                paid_amount=serializer.validated_data['paid_amount'],
                notes=serializer.validated_data.get('notes'),
            )
        except OrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidOrderError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self.get_serializer(order).data)


@extend_schema(tags=['ledger'])
class SaleViewSet(OrderViewSet):
    """Fuel sold to customers."""

    queryset = CustomerSale.objects.all()
    serializer_class = SaleSerializer
    input_serializer_class = SaleInputSerializer
    party_type = PartyType.CUSTOMER
    read_permission = CanReadSales
    create_permission = CanCreateSales

    @extend_schema(request=SaleInputSerializer, responses={201: SaleSerializer})
    def create(self, request, *args, **kwargs):
        return super().create(request, *args, **kwargs)

    def perform_create(self, data):
        return create_sale(**data)


@extend_schema(tags=['ledger'])
class PurchaseViewSet(OrderViewSet):
    """Fuel bought from suppliers."""

    queryset = SupplierPurchase.objects.all()
    serializer_class = PurchaseSerializer
    input_serializer_class = PurchaseInputSerializer
    party_type = PartyType.SUPPLIER
    read_permission = CanReadPurchases
    create_permission = CanCreatePurchases

    @extend_schema(request=PurchaseInputSerializer, responses={201: PurchaseSerializer})
    def create(self, request, *args, **kwargs):
        return super().create(request, *args, **kwargs)

    def perform_create(self, data):
        return create_purchase(**data)


@extend_schema(tags=['ledger'])
class PaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Payment receipts (read-only; receipts are created by the allocator).

    list: All receipts newest first, filterable by party and date
    retrieve: One receipt with its allocations
    """

    queryset = Payment.objects.select_related('recorded_by').prefetch_related('allocations')
    serializer_class = PaymentSerializer
    permission_classes = [CanReadLedger]
    pagination_class = LedgerPagination

    def get_queryset(self):
        """Filter receipts using input serializer validation."""
        queryset = super().get_queryset()

        filter_serializer = PaymentFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'party_type' in params:
            queryset = queryset.filter(party_type=params['party_type'])
        if 'party_name' in params:
            queryset = queryset.filter(party_name=params['party_name'].strip())
        if 'date_from' in params:
            queryset = queryset.filter(date__date__gte=params['date_from'])
        if 'date_to' in params:
            queryset = queryset.filter(date__date__lte=params['date_to'])

        return queryset.order_by('-date', '-created_at')


# =============================================================================
# Reports
# =============================================================================

@extend_schema(
    responses={200: BalanceSheetSerializer},
    description="Totals of all sales and purchases with paid amounts clamped to order totals.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([CanReadLedger])
def balance_sheet(request):
    """Global balance sheet."""
    data = BalanceSheetSerializer(get_balance_sheet()).data
    data['currency'] = ledger_setting('CURRENCY')
    return Response(data)


REPORT_DATE_PARAMETERS = [
    OpenApiParameter('date_from', OpenApiTypes.DATE, description='Only orders on or after this date (YYYY-MM-DD)'),
    OpenApiParameter('date_to', OpenApiTypes.DATE, description='Only orders on or before this date (YYYY-MM-DD)'),
]


def _report_range(request):
    filter_serializer = ReportFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)
    params = filter_serializer.validated_data
    return params.get('date_from'), params.get('date_to')


@extend_schema(
    parameters=REPORT_DATE_PARAMETERS,
    responses={200: PartySummarySerializer(many=True)},
    description=(
        "One summary per customer (or supplier), ordered by name. With a date "
        "range only orders inside it count and parties without any are omitted."
    ),
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([CanReadLedger])
def party_report_list(request, party_type):
    """Per-party totals."""
    date_from, date_to = _report_range(request)
    reports = get_party_reports(party_type, date_from=date_from, date_to=date_to)
    return Response(PartySummarySerializer(reports.values(), many=True).data)


@extend_schema(
    parameters=REPORT_DATE_PARAMETERS,
    responses={200: PartyReportSerializer},
    description="One party's totals and orders, newest first, optionally limited to a date range.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([CanReadLedger])
def party_report_detail(request, party_type, party_name):
    """Single party report."""
    date_from, date_to = _report_range(request)
    report = get_party_report(party_type, party_name, date_from=date_from, date_to=date_to)
    return Response(PartyReportSerializer(report).data)


# =============================================================================
# Payments
# =============================================================================

@extend_schema(
    methods=['GET'],
    responses={200: PaymentSerializer(many=True)},
    description="Payment receipts of one party, newest first.",
    tags=['ledger'],
)
@extend_schema(
    methods=['POST'],
    request=PaymentInputSerializer,
    responses={
        201: AllocationResultSerializer,
        400: ErrorResponseSerializer,
        500: PersistenceFailureResponseSerializer,
    },
    description=(
        "Record a lump-sum payment and apply it to the party's unpaid and "
        "partial orders, oldest first. A payment larger than the outstanding "
        "balance still succeeds with warning=true and the excess in remaining."
    ),
    tags=['ledger'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def party_payments(request, party_type, party_name):
    """List a party's receipts or record a new payment."""
    party_name = party_name.strip()

    if request.method == 'GET':
        if not CanReadLedger().has_permission(request, None):
            return Response({'error': CanReadLedger.message}, status=status.HTTP_403_FORBIDDEN)
        payments = (
            Payment.objects
            .filter(party_type=party_type, party_name=party_name)
            .select_related('recorded_by')
            .prefetch_related('allocations')
            .order_by('-date', '-created_at')
        )
        return Response(PaymentSerializer(payments, many=True).data)

    if not CanRecordPayments().has_permission(request, None):
        return Response({'error': CanRecordPayments.message}, status=status.HTTP_403_FORBIDDEN)

    serializer = PaymentInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        result = allocate_payment(
            party_type=party_type,
            party_name=party_name,
            amount=serializer.validated_data['amount'],
            notes=serializer.validated_data['notes'],
            recorded_by=request.user,
        )
    except (InvalidAmountError, InvalidPartyError, NoOutstandingOrdersError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except PersistenceFailureError as e:
        return Response({
            'error': str(e),
            'rolled_back': e.rolled_back,
            'completed_allocations': AllocationSerializer(e.completed, many=True).data,
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(
        AllocationResultSerializer(result).data,
        status=status.HTTP_201_CREATED
    )
