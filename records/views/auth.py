"""
Identity endpoints under ``/api/auth``.

Staff sign in with e-mail and password and receive a JWT pair.  The
access token travels as ``Authorization: Bearer <token>``; the refresh
token is exchanged for a new access token by the client's refresh timer.
Profiles are created with the default role the first time a user is
seen.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from django.contrib.auth.models import update_last_login
from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

from ..authentication import AnonymousEndpointAuthentication
from ..models import Profile, User
from ..serializers.auth import LoginSerializer, ProfileSerializer, RefreshSerializer, RegisterSerializer
from ..services.profiles import ensure_profile

logger = logging.getLogger(__name__)


class LoginRateThrottle(AnonRateThrottle):
    scope = 'login'


def _token_payload(user) -> dict:
    refresh = RefreshToken.for_user(user)
    access = refresh.access_token
    return {
        'access_token': str(access),
        'refresh_token': str(refresh),
        'expires_at': int(access['exp']),
    }


@api_view(['POST'])
@permission_classes([AllowAny])
@authentication_classes([AnonymousEndpointAuthentication])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    email = s.validated_data['email']

    account = User.objects.filter(email__iexact=email).only('username').first()
    user = None
    if account is not None:
        user = authenticate(request, username=account.username, password=s.validated_data['password'])
    if user is None or not user.is_active:
        logger.warning('failed login for %s from %s', email, request.META.get('REMOTE_ADDR'))
        raise ValidationError({'detail': 'Invalid email or password.'})

    update_last_login(None, user)
    profile = ensure_profile(user)
    logger.info('login %s', user.email)
    return Response({**_token_payload(user), 'user': ProfileSerializer(profile).data})


@api_view(['POST'])
@permission_classes([AllowAny])
@authentication_classes([AnonymousEndpointAuthentication])
@throttle_classes([LoginRateThrottle])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    with transaction.atomic():
        user = User.objects.create_user(
            username=vd['email'],
            email=vd['email'],
            password=vd['password'],
            first_name=vd['full_name'],
        )
        profile = Profile.objects.create(
            user=user,
            email=user.email,
            full_name=vd['full_name'],
            role=vd['role'],
            phone=vd.get('phone') or None,
            department=vd.get('department') or None,
        )
    logger.info('registered %s as %s', user.email, profile.role)
    return Response(
        {'message': 'Registration successful. Please sign in.', 'user': ProfileSerializer(profile).data},
        status=status.HTTP_201_CREATED,
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """Blacklist every outstanding refresh token of the current user."""
    count = 0
    for token in OutstandingToken.objects.filter(user=request.user):
        _, created = BlacklistedToken.objects.get_or_create(token=token)
        count += int(created)
    logger.info('logout %s, %d refresh tokens revoked', request.user.email, count)
    return Response({'ok': True, 'blacklisted': count})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response(ProfileSerializer(ensure_profile(request.user)).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def check_view(request):
    user = request.user
    return Response({'authenticated': bool(user and user.is_authenticated)})


@api_view(['POST'])
@permission_classes([AllowAny])
@authentication_classes([AnonymousEndpointAuthentication])
def refresh_view(request):
    """Exchange ``refresh_token`` for a new access token."""
    s = RefreshSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    t = TokenRefreshSerializer(data={'refresh': s.validated_data['refresh_token']})
    try:
        t.is_valid(raise_exception=True)
    except TokenError as e:
        raise InvalidToken(e.args[0])
    access = t.validated_data['access']
    return Response({
        'access_token': access,
        'expires_at': int(AccessToken(access)['exp']),
    })
