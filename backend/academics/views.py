import logging

from django.db.models import Q
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from activity.bus import get_activity_bus

from .models import Course, Department, Faculty, Student
from .serializers import (
    CourseSerializer,
    DepartmentDetailSerializer,
    DepartmentSerializer,
    FacultySerializer,
    StudentSerializer,
)
from .services import classification, reports
from .services.folders import YearFolders

logger = logging.getLogger(__name__)

# longest id search that still fits a 64-bit primary key
MAX_ID_DIGITS = 18


class StudentViewSet(viewsets.ModelViewSet):
    """Students; delete archives (soft delete) and ``restore`` brings them back."""
    serializer_class = StudentSerializer
    not_found_message = 'Student not found'
    failure_message = 'Failed to process student request'

    def get_queryset(self):
        qs = Student.objects.all()
        params = self.request.query_params
        search = (params.get('search') or '').strip()
        if search:
            cond = (
                Q(first_name__icontains=search) | Q(last_name__icontains=search) | Q(email__icontains=search)
                | Q(department__icontains=search) | Q(program__icontains=search)
            )
            if search.isdecimal() and len(search) <= MAX_ID_DIGITS:
                cond |= Q(pk=int(search))
            qs = qs.filter(cond)
        if params.get('status'):
            qs = qs.filter(status__iexact=params['status'])
        if params.get('academic_year'):
            qs = qs.filter(academic_year=params['academic_year'])
        return qs

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({'students': serializer.data})

    def retrieve(self, request, *args, **kwargs):
        return Response({'student': self.get_serializer(self.get_object()).data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({'student': serializer.data}, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({'student': serializer.data})

    def destroy(self, request, *args, **kwargs):
        self.get_object().soft_delete()
        return Response({'message': 'Student deleted'})

    @action(detail=False, methods=['get'])
    def archived(self, request):
        serializer = self.get_serializer(Student.all_objects.dead(), many=True)
        return Response({'students': serializer.data})

    @action(detail=True, methods=['post'])
    def restore(self, request, pk=None):
        student = get_object_or_404(Student.all_objects.dead(), pk=pk)
        student.restore()
        return Response({'message': 'Student restored!', 'student': self.get_serializer(student).data})

    @action(detail=False, methods=['get'])
    def folders(self, request):
        """Year folders with per-program badge counts."""
        folders = YearFolders('students')
        counts = classification.count_by_year_and_key(
            self.get_queryset(), known_years=folders.known_years(),
        )
        return Response({
            'folders': folders.state(),
            'counts': counts,
            'programs': classification.PROGRAM_CATALOGUE,
        })


class FacultyViewSet(viewsets.ModelViewSet):
    serializer_class = FacultySerializer
    queryset = Faculty.objects.all()
    not_found_message = 'Faculty member not found'
    failure_message = 'Failed to process faculty request'

    def list(self, request, *args, **kwargs):
        qs = self.get_queryset().order_by('last_name', 'first_name', 'id')
        return Response({'faculty': self.get_serializer(qs, many=True).data})

    def retrieve(self, request, *args, **kwargs):
        return Response({'faculty': self.get_serializer(self.get_object()).data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({'faculty': serializer.data}, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({'message': 'Updated', 'faculty': serializer.data})

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({'message': 'Deleted'})

    @action(detail=False, methods=['get'])
    def folders(self, request):
        folders = YearFolders('faculty')
        counts = classification.count_by_year_and_key(self.get_queryset(), known_years=folders.known_years())
        return Response({'folders': folders.state(), 'counts': counts})

    @action(detail=False, methods=['get'])
    def counts(self, request):
        """Badge counts; ``year``, ``position`` and ``program`` narrow what is computed."""
        faculty = list(self.get_queryset())
        year = request.query_params.get('year', '')
        position = request.query_params.get('position', '')
        program = request.query_params.get('program', '')
        data = {'by_bucket': classification.count_faculty_by_bucket(faculty)}
        if program:
            data['teaching'] = classification.count_faculty_for_program(faculty, program)
        if year and program:
            data['deans'] = classification.count_deans_by_program(faculty, year, program)
        if year and position and program:
            data['by_position'] = classification.count_faculty_by_position_and_program(
                faculty, year, position, program,
            )
        return Response(data)


class CourseViewSet(viewsets.ModelViewSet):
    serializer_class = CourseSerializer
    response_envelope = True
    not_found_message = 'Course not found'
    failure_message = 'Failed to process course request'

    def get_queryset(self):
        qs = Course.objects.all()
        params = self.request.query_params
        search = (params.get('search') or '').strip()
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(program__icontains=search) | Q(code__icontains=search))
        if params.get('program'):
            qs = qs.filter(program=params['program'])
        if params.get('status'):
            qs = qs.filter(status=params['status'])
        if params.get('academic_year'):
            qs = qs.filter(academic_year=params['academic_year'])
        return qs.order_by('name', 'id')

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['students'] = list(Student.objects.all())
        return context

    def list(self, request, *args, **kwargs):
        return Response({'success': True, 'courses': self.get_serializer(self.get_queryset(), many=True).data})

    def retrieve(self, request, *args, **kwargs):
        return Response({'success': True, 'course': self.get_serializer(self.get_object()).data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(
            {'success': True, 'message': 'Course created successfully', 'course': serializer.data},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({'success': True, 'message': 'Course updated successfully', 'course': serializer.data})

    def destroy(self, request, *args, **kwargs):
        self.get_object().soft_delete()
        return Response({'success': True, 'message': 'Course deleted successfully'})


class DepartmentViewSet(viewsets.ModelViewSet):
    serializer_class = DepartmentSerializer
    response_envelope = True
    not_found_message = 'Department not found'
    failure_message = 'Failed to process department request'

    def get_queryset(self):
        qs = Department.objects.all()
        params = self.request.query_params
        search = (params.get('search') or '').strip()
        if search:
            qs = qs.filter(name__icontains=search)
        state = params.get('status')
        if state and state != 'All Status':
            qs = qs.filter(status=state)
        return qs.order_by('-created_at', '-id')

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return DepartmentDetailSerializer
        return DepartmentSerializer

    def list(self, request, *args, **kwargs):
        data = self.get_serializer(self.get_queryset(), many=True).data
        return Response({'success': True, 'departments': data})

    def retrieve(self, request, *args, **kwargs):
        return Response({'success': True, 'department': self.get_serializer(self.get_object()).data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(
            {'success': True, 'message': 'Department created successfully', 'department': serializer.data},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({'success': True, 'message': 'Department updated successfully', 'department': serializer.data})

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({'success': True, 'message': 'Department deleted successfully'})


class DashboardView(APIView):
    failure_message = 'Failed to load dashboard'

    def get(self, request):
        summary = classification.dashboard_summary(
            list(Department.objects.all()),
            list(Student.objects.all()),
            list(Faculty.objects.all()),
            list(Course.objects.all()),
        )
        summary['recent_activity'] = get_activity_bus().feed()
        return Response(summary)


class ReportExportView(APIView):
    """CSV (default) or Excel export; ``?output=xlsx`` picks Excel."""
    kind = None
    failure_message = 'Failed to export report'

    def get(self, request):
        params = request.query_params
        output = (params.get('output') or 'csv').lower()
        if output not in ('csv', 'xlsx'):
            return Response({'message': 'Unsupported export format.'}, status=status.HTTP_400_BAD_REQUEST)
        filters = {
            'search': params.get('search', ''),
            'department': params.get('department', ''),
            'academic_year': params.get('academic_year', ''),
        }
        if self.kind == 'faculty':
            payload, content_type, filename = reports.export_faculty(Faculty.objects.all(), output, **filters)
        else:
            payload, content_type, filename = reports.export_students(Student.objects.all(), output, **filters)
        logger.info('Exported %s report as %s', self.kind, output)
        response = HttpResponse(payload, content_type=content_type)
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response


class YearFolderView(APIView):
    """Folder state for a scope; POST ``{label: "2025-2026"}`` adds a custom year."""

    def get(self, request, scope):
        return Response(YearFolders(scope).state())

    def post(self, request, scope):
        folders = YearFolders(scope)
        label = folders.add_custom_year(request.data.get('label'))
        return Response({'label': label, 'folders': folders.state()}, status=status.HTTP_201_CREATED)


class YearFolderActionView(APIView):
    """Archive, restore or delete a folder; body ``{label, confirmation}``."""
    folder_action = None

    def post(self, request, scope):
        folders = YearFolders(scope)
        handler = {
            'archive': folders.archive,
            'restore': folders.restore,
            'delete': folders.delete_year,
        }[self.folder_action]
        label = handler(request.data.get('label'), request.data.get('confirmation'))
        return Response({'label': label, 'folders': folders.state()})
