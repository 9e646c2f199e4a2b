from django.contrib.auth.models import AbstractUser
from django.core.validators import FileExtensionValidator
from django.db import models

PROFILE_IMAGE_EXTENSIONS = ['jpeg', 'png', 'jpg', 'gif']
PROFILE_IMAGE_MAX_BYTES = 2 * 1024 * 1024


class User(AbstractUser):
    """
    Administrator / staff account for the records tool.
    ``position`` decides whether an employee ID is issued; ``token_version``
    invalidates every access token handed out before the last logout.
    """

    class Position(models.TextChoices):
        SYSTEM_ADMINISTRATOR = 'System Administrator', 'System Administrator'
        STUDENT = 'Student', 'Student'
        FACULTY = 'Faculty', 'Faculty'

    name = models.CharField(max_length=255, blank=True, default='')
    email = models.EmailField(
        max_length=255,
        unique=True,
        error_messages={'unique': 'The email has already been taken.'},
    )
    position = models.CharField(max_length=32, choices=Position.choices, default=Position.STUDENT)

    phone = models.CharField(max_length=255, null=True, blank=True)
    gender = models.CharField(max_length=50, null=True, blank=True)
    birth_date = models.DateField(null=True, blank=True)
    nationality = models.CharField(max_length=255, null=True, blank=True)
    civil_status = models.CharField(max_length=255, null=True, blank=True)
    address = models.CharField(max_length=255, null=True, blank=True)

    employee_id = models.CharField(max_length=32, unique=True, null=True, blank=True)
    last_login_at = models.DateTimeField(null=True, blank=True)
    profile_completed = models.BooleanField(default=False)
    profile_image = models.FileField(
        upload_to='profile-images/',
        null=True,
        blank=True,
        validators=[FileExtensionValidator(PROFILE_IMAGE_EXTENSIONS)],
    )

    token_version = models.PositiveIntegerField(default=0)

    @property
    def is_system_administrator(self) -> bool:
        return self.position == self.Position.SYSTEM_ADMINISTRATOR

    def __str__(self):
        return self.username
