import logging

from ..models import Profile

logger = logging.getLogger(__name__)


def ensure_profile(user) -> Profile:
    """Return the user's profile, creating one with the default role if missing."""
    profile, created = Profile.objects.get_or_create(
        user=user,
        defaults={
            'email': user.email,
            'full_name': user.get_full_name() or None,
            'role': Profile.DEFAULT_ROLE,
        },
    )
    if created:
        logger.info('created default profile for %s', user.email)
    return profile
