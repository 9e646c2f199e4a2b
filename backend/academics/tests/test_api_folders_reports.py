import csv
from io import BytesIO, StringIO

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from openpyxl import load_workbook
from rest_framework.test import APIClient

from academics.models import Faculty, Student, TEACHING_POSITIONS
from activity.bus import get_activity_bus
from activity.notifications import get_notification_center
from activity.store import get_state_store, reset_state_store

User = get_user_model()


@override_settings(STATE_STORE={'BACKEND': 'activity.store.MemoryStateStore'})
class APITestCase(TestCase):
    def setUp(self):
        reset_state_store()
        get_notification_center().clear_all()
        self.client = APIClient()
        self.client.force_authenticate(User.objects.create_user(username='admin', email='a@example.com', password='secret1'))


class YearFolderAPITests(APITestCase):
    def test_state(self):
        resp = self.client.get('/api/year-folders/students/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['visible'][0], 'SY 2020-2021')
        self.assertEqual(resp.data['custom'], [])

    def test_unknown_scope_is_404(self):
        resp = self.client.get('/api/year-folders/courses/')
        self.assertEqual(resp.status_code, 404)

    def test_add_custom_year(self):
        resp = self.client.post('/api/year-folders/faculty/', {'label': '2025-2026'}, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['label'], 'SY 2025-2026')
        self.assertIn('SY 2025-2026', resp.data['folders']['visible'])
        self.assertEqual(get_state_store().get('faculty.custom_years'), ['SY 2025-2026'])

        resp = self.client.post('/api/year-folders/faculty/', {'label': '2025-2026'}, format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.data['errors']['label'], ['This School Year folder already exists.'])

    def test_invalid_label(self):
        resp = self.client.post('/api/year-folders/students/', {'label': '2025'}, format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.data['errors']['label'], ['Please enter a valid format (e.g. 2025-2026).'])

    def test_archive_restore_delete(self):
        self.client.post('/api/year-folders/students/', {'label': '2025-2026'}, format='json')

        resp = self.client.post('/api/year-folders/students/archive/', {'label': 'SY 2025-2026', 'confirmation': 'archive'},
                                format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertIn('confirmation', resp.data['errors'])

        resp = self.client.post('/api/year-folders/students/archive/', {'label': 'SY 2025-2026', 'confirmation': 'Archive'},
                                format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertNotIn('SY 2025-2026', resp.data['folders']['visible'])
        self.assertEqual(get_activity_bus().feed()[0]['description'], 'Students SY archived: SY 2025-2026')

        resp = self.client.post('/api/year-folders/students/restore/', {'label': 'SY 2025-2026', 'confirmation': 'Restore'},
                                format='json')
        self.assertIn('SY 2025-2026', resp.data['folders']['visible'])

        resp = self.client.post('/api/year-folders/students/delete/', {'label': 'SY 2025-2026', 'confirmation': 'Delete'},
                                format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertNotIn('SY 2025-2026', resp.data['folders']['all'])

    def test_unknown_folder_is_404(self):
        resp = self.client.post('/api/year-folders/students/archive/', {'label': 'SY 2040-2041', 'confirmation': 'Archive'},
                                format='json')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data, {'message': 'School Year folder "SY 2040-2041" does not exist.'})
        self.assertEqual(get_state_store().get('students.archived_years', []), [])

    def test_baseline_delete_rejected(self):
        resp = self.client.post('/api/year-folders/students/delete/', {'label': 'SY 2020-2021', 'confirmation': 'Delete'},
                                format='json')
        self.assertEqual(resp.status_code, 422)
        self.assertIn('label', resp.data['errors'])

    def test_custom_year_extends_record_grouping(self):
        Student.objects.create(first_name='A', last_name='B', email='ab@example.com', gender='Male',
                               department='Law', academic_year='2025-2026')
        self.assertEqual(self.client.get('/api/students/folders/').data['counts'], {})
        self.client.post('/api/year-folders/students/', {'label': '2025-2026'}, format='json')
        self.assertEqual(self.client.get('/api/students/folders/').data['counts'], {'SY 2025-2026': {'Law': 1}})


class DashboardAPITests(APITestCase):
    def test_summary(self):
        Student.objects.create(first_name='A', last_name='B', email='ab@example.com', gender='Male',
                               department='Nursing', academic_year='SY 2024-2025', course_id='N-1')
        Faculty.objects.create(first_name='C', last_name='D', department=TEACHING_POSITIONS)
        resp = self.client.get('/api/dashboard/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['totals']['students'], 1)
        self.assertEqual(resp.data['totals']['faculty'], 1)
        self.assertEqual(resp.data['faculty_by_bucket'][TEACHING_POSITIONS], 1)
        nursing = next(d for d in resp.data['departments'] if d['name'] == 'Nursing')
        self.assertEqual(nursing['students'], 1)
        self.assertEqual(resp.data['academic_years'][0]['courses'], ['N-1'])
        self.assertEqual(len(resp.data['recent_activity']), 2)


class ReportExportAPITests(APITestCase):
    def setUp(self):
        super().setUp()
        Student.objects.create(first_name='Ana', last_name='Reyes', email='ana@example.com', gender='Female',
                               department='Nursing', program='Nursing', academic_year='SY 2024-2025')
        Student.objects.create(first_name='Ben', last_name='Cruz', email='ben@example.com', gender='Male',
                               department='Law', academic_year='SY 2023-2024', status='Inactive')

    def test_csv_export(self):
        resp = self.client.get('/api/reports/students/export/')
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp['Content-Type'].startswith('text/csv'))
        self.assertIn('attachment; filename="student_reports_', resp['Content-Disposition'])
        rows = list(csv.reader(StringIO(resp.content.decode('utf-8'))))
        self.assertEqual(rows[0], ['Student ID', 'Name', 'Course', 'Department', 'School Year', 'Status'])
        self.assertEqual([r[1] for r in rows[1:]], ['Ana Reyes', 'Ben Cruz'])

    def test_filters(self):
        resp = self.client.get('/api/reports/students/export/', {'department': 'Law', 'academic_year': 'All School Years'})
        rows = list(csv.reader(StringIO(resp.content.decode('utf-8'))))
        self.assertEqual([r[1] for r in rows[1:]], ['Ben Cruz'])

        resp = self.client.get('/api/reports/students/export/', {'search': 'ana', 'department': 'All Departments'})
        rows = list(csv.reader(StringIO(resp.content.decode('utf-8'))))
        self.assertEqual([r[1] for r in rows[1:]], ['Ana Reyes'])

    def test_xlsx_export(self):
        Faculty.objects.create(first_name='Carla', last_name='Diaz', department=TEACHING_POSITIONS,
                               program='Instructor I', assigned_program='Nursing', academic_year='SY 2024-2025',
                               status='Active')
        resp = self.client.get('/api/reports/faculty/export/', {'output': 'xlsx'})
        self.assertEqual(resp.status_code, 200)
        self.assertIn('spreadsheetml', resp['Content-Type'])
        sheet = load_workbook(BytesIO(resp.content)).active
        rows = list(sheet.iter_rows(values_only=True))
        self.assertEqual(rows[0][:3], ('Faculty ID', 'Name', 'Program'))
        self.assertEqual(rows[1][1:3], ('Carla Diaz', 'Nursing'))

    def test_unknown_output(self):
        resp = self.client.get('/api/reports/students/export/', {'output': 'pdf'})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data, {'message': 'Unsupported export format.'})
