"""User registration service."""

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
import structlog

from ..models import Role
from .exceptions import UserRegistrationError

User = get_user_model()
logger = structlog.get_logger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = ""
) -> User:
    """
    Register a new user holding the default "User" role.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is already taken
    """
    email = User.objects.normalize_email(email)
    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("An account with this email already exists")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name
        )
    except IntegrityError:
        raise UserRegistrationError("An account with this email already exists")

    role, _ = Role.objects.get_or_create(name=Role.USER)
    user.roles.add(role)

    logger.info('user_registered', user_id=str(user.id))
    return user
