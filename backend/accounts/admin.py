from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ('username', 'email', 'name', 'position', 'employee_id', 'profile_completed', 'is_active')
    list_filter = ('position', 'profile_completed', 'is_active', 'is_staff')
    search_fields = ('username', 'email', 'name', 'employee_id')
    readonly_fields = ('employee_id', 'last_login_at', 'token_version')
    fieldsets = DjangoUserAdmin.fieldsets + (
        ('Profile', {
            'fields': (
                'name', 'position', 'employee_id', 'phone', 'gender', 'birth_date',
                'nationality', 'civil_status', 'address', 'profile_image', 'profile_completed',
            ),
        }),
        ('Sessions', {'fields': ('last_login_at', 'token_version')}),
    )
    add_fieldsets = DjangoUserAdmin.add_fieldsets + (
        ('Profile', {'fields': ('name', 'email', 'position')}),
    )

    def save_model(self, request, obj, form, change):
        from .services import generate_employee_id

        if obj.is_system_administrator and not obj.employee_id:
            obj.employee_id = generate_employee_id()
        super().save_model(request, obj, form, change)
