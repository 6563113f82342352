from django.conf import settings


def is_moderator(user):
    """True for users holding one of the review moderator roles."""
    if not user or not user.is_authenticated:
        return False
    return user.roles.filter(name__in=settings.REVIEW_MODERATOR_ROLES).exists()
