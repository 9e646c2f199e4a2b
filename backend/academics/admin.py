from django.contrib import admin, messages

from .models import Course, Department, Faculty, Student


class DeletedListFilter(admin.SimpleListFilter):
    title = 'archived'
    parameter_name = 'archived'

    def lookups(self, request, model_admin):
        return (('no', 'Active records'), ('yes', 'Archived records'))

    def queryset(self, request, queryset):
        if self.value() == 'yes':
            return queryset.filter(deleted_at__isnull=False)
        if self.value() == 'no':
            return queryset.filter(deleted_at__isnull=True)
        return queryset


class SoftDeleteAdmin(admin.ModelAdmin):
    actions = ['archive_selected', 'restore_selected']

    @admin.action(description='Archive selected records')
    def archive_selected(self, request, queryset):
        count = 0
        for obj in queryset.filter(deleted_at__isnull=True):
            obj.soft_delete()
            count += 1
        messages.success(request, f'Archived {count} record(s).')

    @admin.action(description='Restore selected records')
    def restore_selected(self, request, queryset):
        count = 0
        for obj in queryset.filter(deleted_at__isnull=False):
            obj.restore()
            count += 1
        messages.success(request, f'Restored {count} record(s).')


@admin.register(Student)
class StudentAdmin(SoftDeleteAdmin):
    list_display = ('id', 'first_name', 'last_name', 'email', 'department', 'program', 'academic_year', 'status', 'deleted_at')
    list_filter = (DeletedListFilter, 'status', 'department')
    search_fields = ('first_name', 'last_name', 'email', 'department', 'program')
    readonly_fields = ('deleted_at', 'created_at', 'updated_at')


@admin.register(Faculty)
class FacultyAdmin(admin.ModelAdmin):
    list_display = ('id', 'last_name', 'first_name', 'email', 'department', 'program', 'assigned_program', 'dean_department', 'status')
    list_filter = ('department', 'status')
    search_fields = ('first_name', 'last_name', 'email', 'program', 'assigned_program')


@admin.register(Course)
class CourseAdmin(SoftDeleteAdmin):
    list_display = ('code', 'name', 'program', 'instructor', 'credits', 'academic_year', 'status', 'deleted_at')
    list_filter = (DeletedListFilter, 'status', 'program')
    search_fields = ('code', 'name', 'program', 'instructor')
    readonly_fields = ('deleted_at', 'created_at', 'updated_at')


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ('name', 'budget', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('name',)
