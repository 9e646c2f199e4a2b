import logging
import secrets
from typing import Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import transaction
from django.db.models import F
from django.utils import timezone

logger = logging.getLogger(__name__)

EMPLOYEE_ID_ATTEMPTS = 1000

# fields an administrator must fill before the profile counts as complete
PROFILE_REQUIRED_FIELDS = ('name', 'gender', 'birth_date', 'nationality', 'civil_status', 'phone', 'address')


def generate_employee_id(year: Optional[int] = None) -> str:
    """Return an unused ``EMP-<year>-<nnn>`` identifier."""
    User = get_user_model()
    year = year or timezone.now().year
    for _ in range(EMPLOYEE_ID_ATTEMPTS):
        candidate = f'EMP-{year}-{secrets.randbelow(999) + 1:03d}'
        if not User.objects.filter(employee_id=candidate).exists():
            return candidate
    logger.error('Employee ID space exhausted for year %s', year)
    raise ValidationError('No employee ID is available for %(year)s.', code='exhausted', params={'year': year})


def compute_profile_completed(user) -> bool:
    if any(not str(getattr(user, name) or '').strip() for name in PROFILE_REQUIRED_FIELDS):
        return False
    return user.employee_id is not None


@transaction.atomic
def register_user(*, name: str, email: str, username: str, password: str, position: str):
    User = get_user_model()
    user = User(name=name, email=email, username=username, position=position)
    user.set_password(password)
    if user.is_system_administrator:
        user.employee_id = generate_employee_id()
    user.save()
    logger.info('Registered user %s position=%s', user.username, user.position)
    return user


def find_user_by_identifier(identifier: str):
    """Resolve a login identifier that is either an email or a username."""
    User = get_user_model()
    identifier = (identifier or '').strip()
    try:
        validate_email(identifier)
    except ValidationError:
        return User.objects.filter(username=identifier).first()
    return User.objects.filter(email=identifier).first()


def authenticate_identifier(identifier: str, password: str):
    user = find_user_by_identifier(identifier)
    if user is None or not user.is_active or not user.check_password(password):
        logger.warning('Failed login for identifier=%s', identifier)
        return None
    user.last_login_at = timezone.now()
    user.save(update_fields=['last_login_at'])
    return user


def update_profile(user, data: dict):
    """Apply profile changes; position and employee ID are never taken from input."""
    data = dict(data)
    data.pop('position', None)
    data.pop('employee_id', None)

    image = data.pop('profile_image', None)
    if image is not None:
        if user.profile_image:
            user.profile_image.delete(save=False)
        user.profile_image = image

    for name, value in data.items():
        setattr(user, name, value)

    if user.is_system_administrator:
        user.profile_completed = compute_profile_completed(user)

    user.save()
    logger.info('Profile updated for %s', user.username)
    return user


def revoke_tokens(user) -> None:
    """Invalidate every access token issued to ``user`` so far."""
    type(user).objects.filter(pk=user.pk).update(token_version=F('token_version') + 1)
    user.refresh_from_db(fields=['token_version'])
    logger.info('Tokens revoked for %s', user.username)
