"""
Create one course per catalogue program.
Usage: python manage.py seed_courses [--academic-year "SY 2024-2025"]
"""
from django.core.management.base import BaseCommand
from django.db import transaction

from academics.models import Course

COURSES = [
    ('Accountancy', 'Accountancy', 'Comprehensive accounting principles and practices', 3),
    ('Accounting Information System', 'Accountancy', 'Computer-based accounting systems and information management', 3),
    ('Internal Auditing', 'Accountancy', 'Principles and practices of internal audit functions', 3),
    ('Management Accounting', 'Accountancy', 'Cost accounting and managerial decision-making', 3),
    ('Business Administration Program', 'Business Administration', 'Fundamentals of business management and administration', 3),
    ('Operation Management', 'Business Administration', 'Management of business operations and processes', 3),
    ('Financials Management', 'Business Administration', 'Corporate finance and financial decision making', 3),
    ('Marketing Management', 'Business Administration', 'Strategic marketing and brand management', 3),
    ('Human Resource Management', 'Business Administration', 'HR strategies and personnel management', 3),
    ('Computer Science', 'Computer Studies', 'Fundamentals of computer science and programming', 3),
    ('Information Technology', 'Computer Studies', 'IT systems, networks, and technology management', 3),
    ('Information Technology with Special Training in Computer Animation', 'Computer Studies', 'IT with specialized focus on computer animation and graphics', 4),
    ('Diploma in Information Technology', 'Computer Studies', 'Diploma program covering essential IT skills', 2),
    ('Library and Information Science', 'Computer Studies', 'Information management and library systems', 3),
    ('Entertainment and Multimedia Computing', 'Computer Studies', 'Multimedia technology and entertainment computing', 3),
    ('Civil Engineering', 'Engineering Technology', 'Design and construction of infrastructure and buildings', 4),
    ('Industrial Engineering', 'Engineering Technology', 'Optimization of complex processes and systems', 4),
    ('Elementary Education', 'Teacher Education', 'Teaching methods and curriculum for elementary students', 3),
    ('Early Childhood Education', 'Teacher Education', 'Child development and early learning strategies', 3),
    ('Physical Education', 'Teacher Education', 'Sports science and physical fitness education', 2),
    ('Special Needs Education', 'Teacher Education', 'Teaching students with special educational needs', 3),
    ('Secondary Education', 'Teacher Education', 'Teaching methods for high school level education', 3),
]


class Command(BaseCommand):
    help = 'Create the standard program courses (existing names are left untouched)'

    def add_arguments(self, parser):
        parser.add_argument('--academic-year', default='SY 2024-2025', help='Academic year label for new courses')

    def handle(self, *args, **options):
        created = 0
        with transaction.atomic():
            for name, program, description, credits in COURSES:
                _, was_created = Course.objects.get_or_create(
                    name=name,
                    program=program,
                    defaults={
                        'description': description,
                        'credits': credits,
                        'academic_year': options['academic_year'],
                        'status': 'Active',
                    },
                )
                created += int(was_created)
        self.stdout.write(self.style.SUCCESS(f'Created {created} course(s); {len(COURSES) - created} already present.'))
