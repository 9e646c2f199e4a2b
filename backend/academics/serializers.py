from django.utils import timezone
from rest_framework import serializers

from .models import ActiveStatus, Course, Department, Faculty, Student
from .services import classification


class StudentSerializer(serializers.ModelSerializer):
    status = serializers.CharField(max_length=20)

    class Meta:
        model = Student
        fields = (
            'id', 'first_name', 'last_name', 'email', 'gender', 'birthdate', 'phone', 'course_id',
            'department', 'program', 'academic_year', 'status', 'created_at', 'updated_at', 'deleted_at',
        )
        read_only_fields = ('id', 'created_at', 'updated_at', 'deleted_at')

    def validate_status(self, value):
        # stored spelling is canonical; input casing varies between forms
        for choice in Student.Status.values:
            if choice.lower() == value.strip().lower():
                return choice
        raise serializers.ValidationError(
            'Status must be one of %s.' % ', '.join(Student.Status.values)
        )

    def validate_birthdate(self, value):
        if value is not None and value > timezone.localdate():
            raise serializers.ValidationError('Birthdate cannot be in the future.')
        return value


class FacultySerializer(serializers.ModelSerializer):
    class Meta:
        model = Faculty
        fields = (
            'id', 'first_name', 'last_name', 'email', 'gender', 'birthdate', 'phone', 'department',
            'program', 'assigned_program', 'dean_department', 'academic_year', 'status',
            'created_at', 'updated_at',
        )
        read_only_fields = ('id', 'created_at', 'updated_at')

    def validate_email(self, value):
        # blank and missing both mean "no email"; only real addresses must be unique
        return value or None


class CourseSerializer(serializers.ModelSerializer):
    name = serializers.CharField(max_length=255, error_messages={
        'required': 'Course name is required.',
        'blank': 'Course name is required.',
    })
    program = serializers.CharField(max_length=255, error_messages={
        'required': 'Program is required.',
        'blank': 'Program is required.',
    })
    credits = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=30, error_messages={
        'invalid': 'Credits must be a number.',
        'min_value': 'Credits must be at least 0.',
        'max_value': 'Credits cannot exceed 30.',
    })
    max_students = serializers.IntegerField(required=False, allow_null=True, min_value=1, error_messages={
        'min_value': 'Maximum students must be at least 1.',
    })
    status = serializers.ChoiceField(choices=ActiveStatus.choices, error_messages={
        'invalid_choice': 'Status must be Active or Inactive.',
    })
    student_count = serializers.SerializerMethodField()

    class Meta:
        model = Course
        fields = (
            'id', 'name', 'code', 'description', 'program', 'instructor', 'credits', 'max_students',
            'semester', 'academic_year', 'status', 'student_count', 'created_at', 'updated_at', 'deleted_at',
        )
        read_only_fields = ('id', 'created_at', 'updated_at', 'deleted_at')

    def validate_code(self, value):
        return value or None

    def get_student_count(self, obj):
        students = self.context.get('students')
        if students is None:
            return None
        return classification.count_students_for_course(students, obj)


class DepartmentSerializer(serializers.ModelSerializer):
    budget = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True,
        error_messages={'min_value': 'The budget must be at least 0.'},
    )
    status = serializers.ChoiceField(choices=ActiveStatus.choices, error_messages={
        'invalid_choice': 'Status must be Active or Inactive.',
    })

    class Meta:
        model = Department
        fields = ('id', 'name', 'description', 'budget', 'status', 'created_at', 'updated_at')
        read_only_fields = ('id', 'created_at', 'updated_at')


class DepartmentDetailSerializer(DepartmentSerializer):
    """Department with the records that name it, matched the same way the dashboard does."""
    students = serializers.SerializerMethodField()
    faculty = serializers.SerializerMethodField()
    courses = serializers.SerializerMethodField()

    class Meta(DepartmentSerializer.Meta):
        fields = DepartmentSerializer.Meta.fields + ('students', 'faculty', 'courses')

    def _related(self, obj):
        cache = self.context.setdefault('_related', {})
        if obj.pk not in cache:
            cache[obj.pk] = classification.records_for_department(
                obj.name,
                Student.objects.all(),
                Faculty.objects.all(),
                Course.objects.all(),
            )
        return cache[obj.pk]

    def get_students(self, obj):
        return StudentSerializer(self._related(obj)['students'], many=True).data

    def get_faculty(self, obj):
        return FacultySerializer(self._related(obj)['faculty'], many=True).data

    def get_courses(self, obj):
        return CourseSerializer(self._related(obj)['courses'], many=True).data
