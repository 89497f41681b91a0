from __future__ import annotations

from rest_framework import serializers

from salon_admin.store.entities import BookingStatus
from salon_admin.store.entities import Status


class ReferenceField(serializers.Field):
    """An id of another record: integers in the fake store, opaque strings remotely."""

    default_error_messages = {"invalid": "A valid id is required."}

    def to_internal_value(self, data):
        if isinstance(data, bool) or data in (None, ""):
            self.fail("invalid")
        if isinstance(data, int):
            return data
        value = str(data).strip()
        if not value:
            self.fail("invalid")
        return int(value) if value.isdecimal() else value

    def to_representation(self, value):
        return value


class EntitySerializer(serializers.Serializer):
    id = serializers.ReadOnlyField()
    created_at = serializers.DateTimeField(read_only=True, allow_null=True)
    updated_at = serializers.DateTimeField(read_only=True, allow_null=True)


class SalonSerializer(EntitySerializer):
    name = serializers.CharField(max_length=255)
    address = serializers.CharField(max_length=500)
    phone = serializers.CharField(max_length=50)
    email = serializers.EmailField()
    status = serializers.ChoiceField(choices=Status.choices, default=Status.ACTIVE)
    waiting_time = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    home_service_available = serializers.BooleanField(default=False)
    rating = serializers.DecimalField(
        max_digits=3,
        decimal_places=2,
        min_value=0,
        max_value=5,
        required=False,
        allow_null=True,
    )
    total_bookings = serializers.IntegerField(read_only=True, allow_null=True)


class ServiceSerializer(EntitySerializer):
    salon_id = ReferenceField()
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    duration = serializers.IntegerField(min_value=1, help_text="Minutes")
    status = serializers.ChoiceField(choices=Status.choices, default=Status.ACTIVE)


class StaffMemberSerializer(EntitySerializer):
    salon_id = ReferenceField()
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    role = serializers.CharField(max_length=100)
    specialization = serializers.CharField(required=False, allow_blank=True, default="")
    status = serializers.ChoiceField(choices=Status.choices, default=Status.ACTIVE)


class BookingSerializer(EntitySerializer):
    salon_id = ReferenceField()
    service_id = ReferenceField()
    staff_id = ReferenceField(required=False, allow_null=True)
    customer_name = serializers.CharField(max_length=255)
    customer_email = serializers.EmailField()
    customer_phone = serializers.CharField(
        max_length=50,
        required=False,
        allow_blank=True,
        default="",
    )
    booking_date = serializers.DateTimeField()
    status = serializers.ChoiceField(
        choices=BookingStatus.choices,
        default=BookingStatus.PENDING,
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class OfferSerializer(EntitySerializer):
    salon_id = ReferenceField()
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    discount_percentage = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=0,
        max_value=100,
    )
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    status = serializers.ChoiceField(choices=Status.choices, default=Status.ACTIVE)

    def validate(self, attrs):
        if attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError(
                {"end_date": "End date cannot be before the start date."},
            )
        return attrs


class StatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Status.choices)


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=BookingStatus.choices)



class AnalyticsQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, required=False)
    period = serializers.CharField(max_length=32, required=False)
