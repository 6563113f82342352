from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import Role, User


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ['name', 'user_count']
    search_fields = ['name']

    def user_count(self, obj):
        return obj.users.count()
    user_count.short_description = 'Users'


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """User management with role assignment."""

    list_display = [
        'email',
        'display_name',
        'role_list',
        'is_active',
        'created_at',
        'last_login',
    ]

    list_filter = [
        'is_active',
        'is_staff',
        'roles',
        'created_at',
    ]

    search_fields = [
        'email',
        'display_name',
    ]

    ordering = ['-created_at']

    # BaseUserAdmin expects a username field
    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'password')
        }),
        ('Roles & Permissions', {
            'fields': ('roles', 'is_active', 'is_staff', 'is_superuser'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'password1', 'password2'),
        }),
        ('Roles', {
            'fields': ('roles',),
        }),
    )

    readonly_fields = ['created_at', 'last_login']
    filter_horizontal = ['roles']

    def role_list(self, obj):
        return ', '.join(obj.role_names()) or '-'
    role_list.short_description = 'Roles'

    @admin.action(description='Grant Admin role')
    def grant_admin(self, request, queryset):
        role, _ = Role.objects.get_or_create(name=Role.ADMIN)
        for user in queryset:
            user.roles.add(role)
        self.message_user(request, f'Granted Admin to {queryset.count()} user(s).')

    actions = ['grant_admin']

    def get_queryset(self, request):
        return super().get_queryset(request).prefetch_related('roles')
