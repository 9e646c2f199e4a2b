from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from academics.models import Course, Department, Faculty, LEADERSHIP_POSITIONS, Student, TEACHING_POSITIONS
from activity.bus import get_activity_bus
from activity.notifications import get_notification_center
from activity.store import reset_state_store

User = get_user_model()

MEMORY_STORE = {'BACKEND': 'activity.store.MemoryStateStore'}


def student_payload(**overrides):
    data = {
        'first_name': 'Ana',
        'last_name': 'Reyes',
        'email': 'ana.reyes@example.com',
        'gender': 'Female',
        'birthdate': '2003-04-12',
        'department': 'Nursing',
        'program': '',
        'academic_year': 'SY 2024-2025',
        'status': 'Active',
    }
    data.update(overrides)
    return data


@override_settings(STATE_STORE=MEMORY_STORE)
class RecordsAPITestCase(TestCase):
    def setUp(self):
        reset_state_store()
        get_notification_center().clear_all()
        self.user = User.objects.create_user(username='registrar', email='registrar@example.com', password='secret1')
        self.client = APIClient()
        self.client.force_authenticate(self.user)


class AuthRequiredTests(TestCase):
    def test_records_require_authentication(self):
        resp = APIClient().get('/api/students/')
        self.assertEqual(resp.status_code, 401)


class StudentAPITests(RecordsAPITestCase):
    def test_create_and_list(self):
        resp = self.client.post('/api/students/', student_payload(status='graduated'), format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['student']['status'], 'Graduated')

        resp = self.client.get('/api/students/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data['students']), 1)

    def test_create_publishes_activity(self):
        self.client.post('/api/students/', student_payload(), format='json')
        feed = get_activity_bus().feed()
        self.assertEqual(feed[0]['description'], 'New student enrolled: Ana Reyes')
        self.assertEqual(feed[0]['type'], 'student')
        self.assertEqual(get_notification_center().snapshot()[0]['kind'], 'add')

    def test_validation_error_shape(self):
        resp = self.client.post('/api/students/', student_payload(email='not-an-email', status='Enrolled'), format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.data['message'], 'Validation failed')
        self.assertIn('email', resp.data['errors'])
        self.assertIn('status', resp.data['errors'])

    def test_duplicate_email(self):
        Student.objects.create(**student_payload(birthdate=None))
        resp = self.client.post('/api/students/', student_payload(), format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.data['errors']['email'], ['The email has already been taken.'])

    def test_future_birthdate_rejected(self):
        resp = self.client.post('/api/students/', student_payload(birthdate='2999-01-01'), format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertIn('birthdate', resp.data['errors'])

    def test_not_found_shape(self):
        resp = self.client.get('/api/students/999/')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data, {'message': 'Student not found'})

    def test_update(self):
        student = Student.objects.create(**student_payload(birthdate=None))
        resp = self.client.patch(f'/api/students/{student.pk}/', {'program': 'Nursing'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['student']['program'], 'Nursing')
        self.assertEqual(get_activity_bus().feed()[0]['description'], 'Student profile updated: Ana Reyes')

    def test_delete_archives_and_restore_brings_back(self):
        student = Student.objects.create(**student_payload(birthdate=None))
        resp = self.client.delete(f'/api/students/{student.pk}/')
        self.assertEqual(resp.data, {'message': 'Student deleted'})
        self.assertFalse(Student.objects.filter(pk=student.pk).exists())
        self.assertTrue(Student.all_objects.filter(pk=student.pk).exists())
        self.assertEqual(get_activity_bus().feed()[0]['description'], 'Student removed: Ana Reyes')

        resp = self.client.get('/api/students/archived/')
        self.assertEqual([s['id'] for s in resp.data['students']], [student.pk])

        resp = self.client.post(f'/api/students/{student.pk}/restore/')
        self.assertEqual(resp.data['message'], 'Student restored!')
        self.assertIsNone(resp.data['student']['deleted_at'])
        self.assertTrue(Student.objects.filter(pk=student.pk).exists())

    def test_restore_live_student_is_404(self):
        student = Student.objects.create(**student_payload(birthdate=None))
        resp = self.client.post(f'/api/students/{student.pk}/restore/')
        self.assertEqual(resp.status_code, 404)

    def test_filters(self):
        Student.objects.create(**student_payload(birthdate=None))
        Student.objects.create(**student_payload(
            first_name='Ben', email='ben@example.com', academic_year='SY 2023-2024', status='Inactive', birthdate=None,
        ))
        self.assertEqual(len(self.client.get('/api/students/?search=ben').data['students']), 1)
        self.assertEqual(len(self.client.get('/api/students/?status=inactive').data['students']), 1)
        self.assertEqual(len(self.client.get('/api/students/', {'academic_year': 'SY 2024-2025'}).data['students']), 1)

    def test_search_by_id(self):
        student = Student.objects.create(**student_payload(birthdate=None))
        resp = self.client.get('/api/students/', {'search': str(student.pk)})
        self.assertEqual([s['id'] for s in resp.data['students']], [student.pk])

    def test_long_numeric_search_is_not_an_id(self):
        Student.objects.create(**student_payload(birthdate=None))
        for term in ('9' * 20, '9' * 40, '²'):
            resp = self.client.get('/api/students/', {'search': term})
            self.assertEqual(resp.status_code, 200, term)
            self.assertEqual(resp.data['students'], [])

    def test_folders_counts(self):
        Student.objects.create(**student_payload(birthdate=None, academic_year='2024', program='Computer Science',
                                                 department='Computer Studies'))
        Student.objects.create(**student_payload(email='x@example.com', birthdate=None, academic_year='1999'))
        resp = self.client.get('/api/students/folders/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['counts'], {'SY 2024-2025': {'Computer Science': 1}})
        self.assertIn('Computer Studies', resp.data['programs'])
        self.assertEqual(resp.data['folders']['scope'], 'students')


class FacultyAPITests(RecordsAPITestCase):
    def test_crud(self):
        resp = self.client.post('/api/faculty/', {
            'first_name': 'Carlos', 'last_name': 'Dela Cruz', 'email': '',
            'department': TEACHING_POSITIONS, 'program': 'Instructor I', 'assigned_program': 'Nursing',
            'academic_year': '2024', 'status': 'Active',
        }, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertIsNone(resp.data['faculty']['email'])
        pk = resp.data['faculty']['id']

        resp = self.client.put(f'/api/faculty/{pk}/', {
            'first_name': 'Carlos', 'last_name': 'Dela Cruz', 'email': '', 'status': 'Inactive',
        }, format='json')
        self.assertEqual(resp.data['message'], 'Updated')
        self.assertEqual(resp.data['faculty']['status'], 'Inactive')

        resp = self.client.delete(f'/api/faculty/{pk}/')
        self.assertEqual(resp.data, {'message': 'Deleted'})
        self.assertFalse(Faculty.objects.filter(pk=pk).exists())
        self.assertEqual(get_activity_bus().feed()[0]['description'], 'Faculty member removed: Carlos Dela Cruz')

    def test_two_faculty_without_email(self):
        for first in ('A', 'B'):
            resp = self.client.post('/api/faculty/', {'first_name': first, 'last_name': 'X', 'email': ''}, format='json')
            self.assertEqual(resp.status_code, 201)

    def test_counts(self):
        Faculty.objects.create(first_name='D', last_name='Dean', department=LEADERSHIP_POSITIONS, program='Deans',
                               dean_department='Nursing', academic_year='2024')
        Faculty.objects.create(first_name='T', last_name='Teacher', department=TEACHING_POSITIONS,
                               program='Instructor I', assigned_program='Nursing', academic_year='2024',
                               status='Active')
        resp = self.client.get('/api/faculty/counts/', {
            'year': 'SY 2024-2025', 'position': 'Instructor I', 'program': 'Nursing',
        })
        self.assertEqual(resp.data['deans'], 1)
        self.assertEqual(resp.data['teaching'], 1)
        self.assertEqual(resp.data['by_position'], 1)
        self.assertEqual(resp.data['by_bucket'][LEADERSHIP_POSITIONS], 1)

    def test_counts_without_filters_only_buckets(self):
        resp = self.client.get('/api/faculty/counts/')
        self.assertEqual(list(resp.data), ['by_bucket'])

    def test_folders_group_by_program_else_department(self):
        Faculty.objects.create(first_name='S', last_name='Staff', department='Support, Non-Academic / Administrative Roles',
                               academic_year='SY 2022-2023')
        resp = self.client.get('/api/faculty/folders/')
        self.assertEqual(resp.data['counts'], {
            'SY 2022-2023': {'Support, Non-Academic / Administrative Roles': 1},
        })


class CourseAPITests(RecordsAPITestCase):
    def payload(self, **overrides):
        data = {'name': 'Anatomy', 'code': 'NUR-101', 'program': 'Nursing', 'credits': 3, 'status': 'Active'}
        data.update(overrides)
        return data

    def test_create_envelope(self):
        resp = self.client.post('/api/courses/', self.payload(), format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertTrue(resp.data['success'])
        self.assertEqual(resp.data['message'], 'Course created successfully')
        self.assertEqual(resp.data['course']['student_count'], 0)

    def test_student_count(self):
        course = Course.objects.create(**self.payload())
        Student.objects.create(**student_payload(birthdate=None, program='anatomy', department='Nursing'))
        resp = self.client.get(f'/api/courses/{course.pk}/')
        self.assertEqual(resp.data['course']['student_count'], 1)

    def test_validation_messages(self):
        resp = self.client.post('/api/courses/', self.payload(name='', credits=31, status='Closed'), format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertFalse(resp.data['success'])
        errors = resp.data['errors']
        self.assertEqual(errors['name'], ['Course name is required.'])
        self.assertEqual(errors['credits'], ['Credits cannot exceed 30.'])
        self.assertEqual(errors['status'], ['Status must be Active or Inactive.'])

    def test_not_found(self):
        resp = self.client.get('/api/courses/12345/')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data, {'message': 'Course not found', 'success': False})

    def test_update_and_soft_delete(self):
        course = Course.objects.create(**self.payload())
        resp = self.client.patch(f'/api/courses/{course.pk}/', {'credits': 4}, format='json')
        self.assertEqual(resp.data['message'], 'Course updated successfully')
        resp = self.client.delete(f'/api/courses/{course.pk}/')
        self.assertEqual(resp.data, {'success': True, 'message': 'Course deleted successfully'})
        self.assertTrue(Course.all_objects.get(pk=course.pk).is_deleted)
        self.assertEqual(get_activity_bus().feed()[0]['description'], 'Course deleted: Anatomy')

    def test_blank_codes_do_not_collide(self):
        self.client.post('/api/courses/', self.payload(code=''), format='json')
        resp = self.client.post('/api/courses/', self.payload(name='Physiology', code=''), format='json')
        self.assertEqual(resp.status_code, 201)

    def test_filters(self):
        Course.objects.create(**self.payload())
        Course.objects.create(**self.payload(name='Torts', code='LAW-1', program='Law', status='Inactive'))
        self.assertEqual(len(self.client.get('/api/courses/?program=Law').data['courses']), 1)
        self.assertEqual(len(self.client.get('/api/courses/?status=Active').data['courses']), 1)
        self.assertEqual(len(self.client.get('/api/courses/?search=nur').data['courses']), 1)


class DepartmentAPITests(RecordsAPITestCase):
    def test_seeded_departments_listed(self):
        resp = self.client.get('/api/departments/', {'status': 'All Status'})
        self.assertTrue(resp.data['success'])
        names = {d['name'] for d in resp.data['departments']}
        self.assertIn('Nursing', names)
        self.assertEqual(len(names), Department.objects.count())

    def test_status_filter(self):
        Department.objects.create(name='Fine Arts', status='Inactive')
        resp = self.client.get('/api/departments/?status=Inactive')
        self.assertEqual([d['name'] for d in resp.data['departments']], ['Fine Arts'])

    def test_show_nests_related_records(self):
        department = Department.objects.get(name='Nursing')
        Student.objects.create(**student_payload(birthdate=None))
        Faculty.objects.create(first_name='D', last_name='Dean', department=LEADERSHIP_POSITIONS, program='Deans',
                               dean_department='Nursing')
        Course.objects.create(name='Anatomy', program='Nursing')
        resp = self.client.get(f'/api/departments/{department.pk}/')
        body = resp.data['department']
        self.assertEqual(len(body['students']), 1)
        self.assertEqual(len(body['faculty']), 1)
        self.assertEqual(len(body['courses']), 1)

    def test_create_update_delete(self):
        resp = self.client.post('/api/departments/', {'name': 'Fine Arts', 'budget': '1000.00', 'status': 'Active'},
                                format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['message'], 'Department created successfully')
        pk = resp.data['department']['id']
        self.assertEqual(get_activity_bus().feed()[0]['description'], 'New program created: Fine Arts')

        resp = self.client.patch(f'/api/departments/{pk}/', {'budget': '-1'}, format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.data['errors']['budget'], ['The budget must be at least 0.'])

        resp = self.client.delete(f'/api/departments/{pk}/')
        self.assertEqual(resp.data['message'], 'Department deleted successfully')
        self.assertEqual(get_activity_bus().feed()[0]['description'], 'Program deleted: Fine Arts')

    def test_duplicate_name(self):
        resp = self.client.post('/api/departments/', {'name': 'Nursing', 'status': 'Active'}, format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.data['errors']['name'], ['The name has already been taken.'])


class ActivityAPITests(RecordsAPITestCase):
    def test_feed_and_notifications(self):
        Course.objects.create(name='Anatomy', program='Nursing')
        resp = self.client.get('/api/activity/')
        self.assertEqual(resp.data['activities'][0]['description'], 'New course created: Anatomy')

        resp = self.client.get('/api/notifications/')
        toast = resp.data['notifications'][0]
        self.assertEqual(toast['message'], 'New course created: Anatomy')

        resp = self.client.post(f"/api/notifications/{toast['id']}/hover/")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.data['notification']['hovered'])

        resp = self.client.post(f"/api/notifications/{toast['id']}/dismiss/")
        self.assertEqual(resp.data['notifications'], [])

        resp = self.client.post(f"/api/notifications/{toast['id']}/leave/")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data, {'message': 'Notification not found'})

    def test_clear_notifications(self):
        Course.objects.create(name='Anatomy', program='Nursing')
        resp = self.client.delete('/api/notifications/')
        self.assertEqual(resp.data, {'notifications': []})
        self.assertEqual(get_notification_center().snapshot(), [])
