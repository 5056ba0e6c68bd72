from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..serializers.resources import DischargeSerializer
from ..services.catalog import get_resource


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def discharge_admission(request, pk):
    """Close an admission.  ``discharge_date`` defaults to now."""
    admissions = get_resource('ipd-patients')
    s = DischargeSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    adm = admissions.discharge(pk, s.validated_data.get('discharge_date'))
    return Response(admissions.serialize(adm))
