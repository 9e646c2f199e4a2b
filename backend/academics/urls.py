from django.urls import path, re_path
from rest_framework.routers import DefaultRouter

from .views import (
    CourseViewSet,
    DashboardView,
    DepartmentViewSet,
    FacultyViewSet,
    ReportExportView,
    StudentViewSet,
    YearFolderActionView,
    YearFolderView,
)

router = DefaultRouter()
router.register(r'students', StudentViewSet, basename='student')
router.register(r'faculty', FacultyViewSet, basename='faculty')
router.register(r'courses', CourseViewSet, basename='course')
router.register(r'departments', DepartmentViewSet, basename='department')

FOLDER_SCOPE = r'(?P<scope>students|faculty)'

urlpatterns = [
    path('dashboard/', DashboardView.as_view(), name='dashboard'),
    path('reports/students/export/', ReportExportView.as_view(kind='students'), name='report-students-export'),
    path('reports/faculty/export/', ReportExportView.as_view(kind='faculty'), name='report-faculty-export'),
    re_path(rf'^year-folders/{FOLDER_SCOPE}/$', YearFolderView.as_view(), name='year-folders'),
    re_path(rf'^year-folders/{FOLDER_SCOPE}/archive/$', YearFolderActionView.as_view(folder_action='archive'), name='year-folders-archive'),
    re_path(rf'^year-folders/{FOLDER_SCOPE}/restore/$', YearFolderActionView.as_view(folder_action='restore'), name='year-folders-restore'),
    re_path(rf'^year-folders/{FOLDER_SCOPE}/delete/$', YearFolderActionView.as_view(folder_action='delete'), name='year-folders-delete'),
]

urlpatterns += router.urls
