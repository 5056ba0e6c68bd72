"""
Bill, bill item and payment serializers.

``paid_amount`` and ``status`` are never written by clients: the amount
only moves through recorded payments and the status is derived from it.
Persistence is delegated to :mod:`records.services.billing` so that a
bill and its items are stored in one transaction.
"""
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from ..models import Appointment, Bill, BillItem, Doctor, Patient, Payment
from ..services.billing import create_bill, update_bill
from .common import CleanTextMixin, ref

ZERO = Decimal('0')
MONEY = {'max_digits': 12, 'decimal_places': 2}


class BillItemInlineSerializer(CleanTextMixin, serializers.ModelSerializer):
    clean_fields = ('description',)
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)
    rate = serializers.DecimalField(min_value=ZERO, required=False, default=ZERO, **MONEY)
    amount = serializers.DecimalField(min_value=ZERO, required=False, **MONEY)

    class Meta:
        model = BillItem
        fields = ['id', 'description', 'quantity', 'rate', 'amount', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if 'amount' not in attrs and self.instance is None:
            attrs['amount'] = attrs.get('quantity', 1) * attrs.get('rate', ZERO)
        return attrs


class BillItemSerializer(BillItemInlineSerializer):
    bill_id = ref(Bill, 'bill')

    class Meta(BillItemInlineSerializer.Meta):
        fields = ['id', 'bill_id', 'description', 'quantity', 'rate', 'amount', 'created_at']


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ['id', 'amount', 'payment_method', 'transaction_id', 'created_at']
        read_only_fields = fields


class PaymentInputSerializer(CleanTextMixin, serializers.Serializer):
    clean_fields = ('payment_method', 'transaction_id')
    amount = serializers.DecimalField(**MONEY)
    payment_method = serializers.CharField(max_length=50)
    transaction_id = serializers.CharField(max_length=128, required=False, allow_blank=True, allow_null=True)

    def validate_amount(self, v):
        if v <= 0:
            raise serializers.ValidationError('Payment amount must be positive.')
        return v


class BillSerializer(serializers.ModelSerializer):
    patient_id = ref(Patient, 'patient')
    doctor_id = ref(Doctor, 'doctor', required=False)
    appointment_id = ref(Appointment, 'appointment', required=False)
    date = serializers.DateField(required=False)
    subtotal = serializers.DecimalField(min_value=ZERO, required=False, **MONEY)
    discount = serializers.DecimalField(min_value=ZERO, required=False, **MONEY)
    total_amount = serializers.DecimalField(min_value=ZERO, required=False, **MONEY)
    bill_items = BillItemInlineSerializer(many=True, required=False)
    payments = PaymentSerializer(many=True, read_only=True)

    class Meta:
        model = Bill
        fields = [
            'id', 'patient_id', 'doctor_id', 'appointment_id', 'date', 'subtotal', 'discount',
            'total_amount', 'paid_amount', 'status', 'bill_items', 'payments', 'created_at',
        ]
        read_only_fields = ['id', 'paid_amount', 'status', 'created_at']

    def validate(self, attrs):
        if self.instance is not None and 'bill_items' in attrs:
            raise serializers.ValidationError({'bill_items': 'Items are changed through /api/bill-items.'})
        return attrs

    def create(self, validated_data):
        return create_bill(validated_data)

    def update(self, instance, validated_data):
        return update_bill(instance, validated_data)
