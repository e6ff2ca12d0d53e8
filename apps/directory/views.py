from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from apps.accounts.permissions import (
    CanReadLedger,
    CanCreateSales,
    CanCreatePurchases,
    CanReadProducts,
    CanCreateProducts,
)
from .models import Product
from .serializers import (
    PartyInputSerializer,
    PartySearchSerializer,
    ProductInputSerializer,
    ProductSerializer,
    PARTY_SERIALIZERS,
)
from .services import (
    get_or_create_party,
    search_parties,
    list_parties,
    create_product,
    DuplicateProductError,
)


# Creating a customer comes with recording sales, a supplier with purchases
CREATE_PERMISSIONS = {
    'customer': CanCreateSales,
    'supplier': CanCreatePurchases,
}


def _denied(permission_class):
    return Response(
        {'error': permission_class.message},
        status=status.HTTP_403_FORBIDDEN
    )


@extend_schema(
    methods=['GET'],
    responses={200: PARTY_SERIALIZERS['customer'](many=True)},
    description="List customers or suppliers by name.",
    tags=['directory'],
)
@extend_schema(
    methods=['POST'],
    request=PartyInputSerializer,
    responses={201: PARTY_SERIALIZERS['customer']},
    description="Return the party with this name, creating it if missing.",
    tags=['directory'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def party_list_create(request, kind):
    """List parties or create-or-get one by name."""
    serializer_class = PARTY_SERIALIZERS[kind]

    if request.method == 'GET':
        if not CanReadLedger().has_permission(request, None):
            return _denied(CanReadLedger)
        parties = list_parties(kind=kind)
        return Response(serializer_class(parties, many=True).data)

    permission = CREATE_PERMISSIONS[kind]
    if not permission().has_permission(request, None):
        return _denied(permission)

    input_serializer = PartyInputSerializer(data=request.data)
    input_serializer.is_valid(raise_exception=True)
    data = input_serializer.validated_data

    party, created = get_or_create_party(
        kind=kind,
        name=data['name'],
        phone=data.get('phone'),
        email=data.get('email'),
        address=data.get('address'),
    )
    return Response(
        serializer_class(party).data,
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
    )


@extend_schema(
    parameters=[OpenApiParameter('q', str, description='Part of the name')],
    responses={200: PARTY_SERIALIZERS['customer'](many=True)},
    description="Case-insensitive name search, at most 10 results.",
    tags=['directory'],
)
@api_view(['GET'])
@permission_classes([CanReadLedger])
def party_search(request, kind):
    """Search customers or suppliers by name."""
    params = PartySearchSerializer(data=request.query_params)
    params.is_valid(raise_exception=True)

    parties = search_parties(kind=kind, query=params.validated_data['q'])
    return Response(PARTY_SERIALIZERS[kind](parties, many=True).data)


@extend_schema(
    methods=['GET'],
    responses={200: ProductSerializer(many=True)},
    description="List catalog products.",
    tags=['directory'],
)
@extend_schema(
    methods=['POST'],
    request=ProductInputSerializer,
    responses={201: ProductSerializer},
    description="Add a product to the catalog (admin and manager).",
    tags=['directory'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def product_list_create(request):
    """List products or add one."""
    if request.method == 'GET':
        if not CanReadProducts().has_permission(request, None):
            return _denied(CanReadProducts)
        products = Product.objects.order_by('name')
        return Response(ProductSerializer(products, many=True).data)

    if not CanCreateProducts().has_permission(request, None):
        return _denied(CanCreateProducts)

    serializer = ProductInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        product = create_product(**serializer.validated_data)
    except DuplicateProductError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)
