from rest_framework import serializers
from .models import User
from .roles import Role


class UserSerializer(serializers.ModelSerializer):
    """User as shown to the signed-in user and to admins."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'role',
            'is_active',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    class Meta:
        model = User
        fields = ['id', 'name', 'email']
        read_only_fields = fields


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class UserCreateSerializer(serializers.Serializer):
    """Input for an admin creating a staff account."""

    name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(
        min_length=6,
        write_only=True,
        style={'input_type': 'password'}
    )
    role = serializers.ChoiceField(choices=Role.choices, default=Role.VIEWER)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required')
        return value
