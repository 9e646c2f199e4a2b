from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings

from academics.management.commands.seed_courses import COURSES
from academics.models import Course, Department, Student
from activity.store import reset_state_store


@override_settings(STATE_STORE={'BACKEND': 'activity.store.MemoryStateStore'})
class CommandTests(TestCase):
    def setUp(self):
        reset_state_store()

    def test_insert_test_student(self):
        out = StringIO()
        call_command('insert_test_student', stdout=out)
        student = Student.objects.get(email='t.test+125@example.com')
        self.assertEqual(student.department, 'Accountancy')
        self.assertIn(f'id={student.pk}', out.getvalue())

        with self.assertRaises(CommandError):
            call_command('insert_test_student', stdout=StringIO())
        self.assertEqual(Student.all_objects.filter(email='t.test+125@example.com').count(), 1)

    def test_seed_courses_is_idempotent(self):
        call_command('seed_courses', '--academic-year', 'SY 2023-2024', stdout=StringIO())
        self.assertEqual(Course.objects.count(), len(COURSES))
        self.assertEqual(set(Course.objects.values_list('academic_year', flat=True)), {'SY 2023-2024'})

        call_command('seed_courses', stdout=StringIO())
        self.assertEqual(Course.objects.count(), len(COURSES))


class SeedDepartmentsTests(TestCase):
    def test_departments_seeded_by_migration(self):
        self.assertEqual(Department.objects.count(), 9)
        nursing = Department.objects.get(name='Nursing')
        self.assertEqual(nursing.status, 'Active')
        self.assertGreater(nursing.budget, 0)
