from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

# Faculty "department" values are classification buckets, in display order.
LEADERSHIP_POSITIONS = 'Major Leadership / Administrative Positions'
TEACHING_POSITIONS = 'Academic / Teaching Positions'
SUPPORT_ROLES = 'Support, Non-Academic / Administrative Roles'
STUDENT_ASSISTANT_POSITION = 'Student Assistant Position'

FACULTY_BUCKETS = (
    LEADERSHIP_POSITIONS,
    TEACHING_POSITIONS,
    SUPPORT_ROLES,
    STUDENT_ASSISTANT_POSITION,
)

DEAN_PROGRAM = 'Deans'


class ActiveStatus(models.TextChoices):
    ACTIVE = 'Active', 'Active'
    INACTIVE = 'Inactive', 'Inactive'


class SoftDeleteQuerySet(models.QuerySet):
    def alive(self):
        return self.filter(deleted_at__isnull=True)

    def dead(self):
        return self.filter(deleted_at__isnull=False)


class AliveManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    def get_queryset(self):
        return super().get_queryset().alive()


class SoftDeleteModel(models.Model):
    """Rows are hidden by setting ``deleted_at``; ``objects`` only sees live rows."""
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = AliveManager()
    all_objects = models.Manager.from_queryset(SoftDeleteQuerySet)()

    class Meta:
        abstract = True
        # uniqueness checks must see archived rows too
        default_manager_name = 'all_objects'

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def soft_delete(self):
        self.deleted_at = timezone.now()
        self.save(update_fields=['deleted_at', 'updated_at'])

    def restore(self):
        self.deleted_at = None
        self.save(update_fields=['deleted_at', 'updated_at'])


class Department(models.Model):
    name = models.CharField(max_length=255, unique=True, error_messages={'unique': 'The name has already been taken.'})
    description = models.TextField(null=True, blank=True)
    budget = models.DecimalField(
        max_digits=14, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(0)],
    )
    status = models.CharField(max_length=16, choices=ActiveStatus.choices, default=ActiveStatus.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('-created_at', '-id')

    def __str__(self):
        return self.name


class Student(SoftDeleteModel):
    class Status(models.TextChoices):
        ACTIVE = 'Active', 'Active'
        INACTIVE = 'Inactive', 'Inactive'
        GRADUATED = 'Graduated', 'Graduated'
        SUSPENDED = 'Suspended', 'Suspended'

    first_name = models.CharField(max_length=255)
    last_name = models.CharField(max_length=255)
    email = models.EmailField(max_length=255, unique=True, error_messages={'unique': 'The email has already been taken.'})
    gender = models.CharField(max_length=20)
    birthdate = models.DateField(null=True, blank=True)
    phone = models.CharField(max_length=32, null=True, blank=True)
    course_id = models.CharField(max_length=50, null=True, blank=True)
    department = models.CharField(max_length=255)
    program = models.CharField(max_length=255, null=True, blank=True)
    # free text: "SY 2024-2025", "2024-2025" and "2024" all occur
    academic_year = models.CharField(max_length=32)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta(SoftDeleteModel.Meta):
        ordering = ('id',)

    def __str__(self):
        return f'{self.first_name} {self.last_name}'


class Faculty(models.Model):
    first_name = models.CharField(max_length=255)
    last_name = models.CharField(max_length=255)
    email = models.EmailField(
        max_length=255, unique=True, null=True, blank=True,
        error_messages={'unique': 'The email has already been taken.'},
    )
    gender = models.CharField(max_length=20, null=True, blank=True)
    birthdate = models.DateField(null=True, blank=True)
    phone = models.CharField(max_length=32, null=True, blank=True)
    department = models.CharField(max_length=255, null=True, blank=True)
    # position/title; "Deans" routes through dean_department
    program = models.CharField(max_length=255, null=True, blank=True)
    assigned_program = models.CharField(max_length=255, null=True, blank=True)
    dean_department = models.CharField(max_length=255, null=True, blank=True)
    academic_year = models.CharField(max_length=32, null=True, blank=True)
    status = models.CharField(max_length=20, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('last_name', 'first_name', 'id')
        verbose_name_plural = 'faculty'

    def __str__(self):
        return f'{self.first_name} {self.last_name}'


class Course(SoftDeleteModel):
    name = models.CharField(max_length=255)
    code = models.CharField(
        max_length=50, unique=True, null=True, blank=True,
        error_messages={'unique': 'The code has already been taken.'},
    )
    description = models.TextField(null=True, blank=True)
    # owning department name
    program = models.CharField(max_length=255)
    instructor = models.CharField(max_length=255, null=True, blank=True)
    credits = models.PositiveSmallIntegerField(
        null=True, blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(30)],
    )
    max_students = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    semester = models.CharField(max_length=50, null=True, blank=True)
    academic_year = models.CharField(max_length=32, null=True, blank=True)
    status = models.CharField(max_length=16, choices=ActiveStatus.choices, default=ActiveStatus.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta(SoftDeleteModel.Meta):
        ordering = ('name', 'id')

    def __str__(self):
        return f'{self.code} - {self.name}' if self.code else self.name
