"""
Cookie Consent Serializers
"""

from rest_framework import serializers


class RejectSerializer(serializers.Serializer):
    """Reject one category, or every optional one when omitted"""

    category = serializers.CharField(
        required=False,
        allow_blank=False,
        max_length=64,
        help_text="Optional: category key to reject"
    )


class CustomizeSerializer(serializers.Serializer):
    """
    Accepts either {"categories": {"marketing": true}} or the bare
    {"marketing": true} mapping.
    """

    categories = serializers.DictField(
        child=serializers.BooleanField(),
        allow_empty=False,
    )

    def to_internal_value(self, data):
        if isinstance(data, dict) and "categories" not in data:
            data = {"categories": data}
        return super().to_internal_value(data)


class ComplianceQuerySerializer(serializers.Serializer):
    regulation = serializers.CharField(required=False, max_length=32)


class ConsentLogQuerySerializer(serializers.Serializer):
    category = serializers.CharField(required=False, max_length=64)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=1000)
