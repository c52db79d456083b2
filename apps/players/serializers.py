from rest_framework import serializers
from .models import Player


# =============================================================================
# Input Serializers
# =============================================================================

class PlayerFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for roster listing.

    Query Parameters:
        search (str): Matches full name, nickname or mobile
        regular (bool): Only regular (true) or additional (false) players
    """

    search = serializers.CharField(required=False, allow_blank=True, max_length=100)
    regular = serializers.BooleanField(required=False, allow_null=True, default=None)


# =============================================================================
# Output Serializers
# =============================================================================

class PlayerSerializer(serializers.ModelSerializer):
    """Roster entry, used for both input and output."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = Player
        fields = [
            'id',
            'first_name',
            'last_name',
            'nickname',
            'display_name',
            'mobile',
            'balance',
            'arrears',
            'advance_payment',
            'regular',
            'created_at',
            'updated_at',
        ]
        read_only_fields = [
            'id',
            'display_name',
            'created_at',
            'updated_at',
        ]

    def get_display_name(self, obj):
        return obj.get_display_name()

    def validate_first_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('First name is required')
        return value


class PlayerMinimalSerializer(serializers.ModelSerializer):
    """Minimal player info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = Player
        fields = ['id', 'display_name', 'regular']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()
