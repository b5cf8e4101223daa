from rest_framework import serializers


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Base serializer that provides common functionality.

    Features:
    - Optimization hints read by OptimizedQuerysetMixin
    - Common validation hook
    """

    class Meta:
        # Default optimization fields (can be overridden)
        select_related_fields = []
        prefetch_related_fields = []

    def validate(self, data):
        """
        Base validation that can be extended by child classes.
        """
        data = super().validate(data)
        return data


class MoneyField(serializers.DecimalField):
    """
    DecimalField preset for monetary amounts (10 digits, 2 places).
    """

    def __init__(self, **kwargs):
        kwargs.setdefault("max_digits", 10)
        kwargs.setdefault("decimal_places", 2)
        super().__init__(**kwargs)
