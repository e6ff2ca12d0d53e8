from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema
from .models import User
from .permissions import IsAdminRole
from .serializers import (
    UserLoginSerializer,
    UserSerializer,
    UserCreateSerializer,
)
from .services import (
    authenticate_user,
    create_user_account,
    toggle_user_active,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    DuplicateEmailError,
    SelfDeactivationError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, help_text="Refresh token of the session")


class ToggleResponseSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    is_active = serializers.BooleanField()


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_user(
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password'],
        )
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    refresh = RefreshToken.for_user(user)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    })


@extend_schema(
    request=LogoutRequestSerializer,
    responses={200: MessageResponseSerializer},
    description="Logout. Tokens are stateless, so the client discards them.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Acknowledge logout."""
    return Response({'message': 'Logged out'})


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    methods=['GET'],
    responses={200: UserSerializer(many=True)},
    description="List staff accounts (admin only).",
    tags=['users'],
)
@extend_schema(
    methods=['POST'],
    request=UserCreateSerializer,
    responses={
        201: UserSerializer,
        400: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Create a staff account (admin only). Role defaults to viewer.",
    tags=['users'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def user_list_create(request):
    """List users or create a new one."""
    if request.method == 'GET':
        users = User.objects.order_by('name')
        return Response(UserSerializer(users, many=True).data)

    serializer = UserCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = create_user_account(**serializer.validated_data)
    except DuplicateEmailError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=None,
    responses={
        200: ToggleResponseSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Activate or deactivate a user (admin only).",
    tags=['users'],
)
@api_view(['PATCH'])
@permission_classes([IsAdminRole])
def toggle_user(request, pk):
    """Flip a user's active flag."""
    try:
        user = toggle_user_active(user_id=pk, acting_user=request.user)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except SelfDeactivationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'id': user.id, 'is_active': user.is_active})
