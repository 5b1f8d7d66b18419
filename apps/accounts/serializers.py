from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for list and detail views."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'is_active',
            'created_at',
        ]
        read_only_fields = ['id', 'is_active', 'created_at']


class UserCreateSerializer(serializers.ModelSerializer):
    """Validate input for creating a user."""

    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )

    class Meta:
        model = User
        fields = ['email', 'password', 'name']


class UserUpdateSerializer(serializers.ModelSerializer):
    """Serializer for updating name, email or password."""

    password = serializers.CharField(
        write_only=True,
        required=False,
        validators=[validate_password],
        style={'input_type': 'password'}
    )

    class Meta:
        model = User
        fields = ['email', 'password', 'name']

    def update(self, instance, validated_data):
        """Hash a new password instead of storing it raw."""
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance
