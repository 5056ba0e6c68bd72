from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..serializers.billing import PaymentInputSerializer
from ..services.billing import record_payment
from ..services.catalog import get_resource


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def bill_payments(request, pk):
    """Record a payment against a bill and return the updated bill.

    Body: ``amount``, ``payment_method`` and optionally ``transaction_id``.
    Paying a bill that is already ``Paid`` answers 409; an amount above
    the outstanding balance is a validation error.
    """
    bills = get_resource('bills')
    bill = bills.get(pk)
    s = PaymentInputSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    bill = record_payment(bill.pk, **s.validated_data)
    return Response(bills.serialize(bills.get(bill.pk)))
