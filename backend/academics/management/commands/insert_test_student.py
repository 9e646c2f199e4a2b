"""
Insert a fixed diagnostic student record.
Usage: python manage.py insert_test_student
"""
from django.core.management.base import BaseCommand, CommandError

from academics.models import Student

TEST_STUDENT = {
    'first_name': 'Ttest3',
    'last_name': 'User',
    'email': 't.test+125@example.com',
    'gender': 'Male',
    'academic_year': 'SY 2020-2021',
    'department': 'Accountancy',
    'status': 'Active',
    'program': 'Accountancy',
    'birthdate': '2004-09-05',
    'phone': '09517910305',
    'course_id': '123234',
}


class Command(BaseCommand):
    help = 'Insert a test student record'

    def handle(self, *args, **options):
        if Student.all_objects.filter(email=TEST_STUDENT['email']).exists():
            raise CommandError(f"A student with email {TEST_STUDENT['email']} already exists.")
        student = Student.objects.create(**TEST_STUDENT)
        self.stdout.write(self.style.SUCCESS(f'Inserted test student (id={student.pk}).'))
