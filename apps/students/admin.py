from django.contrib import admin

from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ('name', 'phone', 'gym', 'membership_type', 'status',
                   'last_payment_date', 'next_payment_date')
    list_filter = ('gym', 'status', 'membership_type')
    search_fields = ('name', 'phone')
    readonly_fields = ('last_payment_date', 'next_payment_date', 'created_at', 'updated_at')
    ordering = ('name',)
