from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..serializers.auth import ProfileSerializer
from ..services.profiles import ensure_profile


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def profile(request):
    """Current user's profile, created with the default role on first access.

    PATCH accepts ``full_name``, ``phone``, ``department`` and
    ``doctor_id``; ``role`` and ``email`` are ignored.
    """
    prof = ensure_profile(request.user)
    if request.method == 'PATCH':
        s = ProfileSerializer(prof, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        prof = s.save()
    return Response(ProfileSerializer(prof).data)
