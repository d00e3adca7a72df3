# payments/admin.py
from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('id', 'student', 'amount', 'payment_type',
                   'payment_method', 'gym', 'payment_date', 'processed_by')
    list_filter = ('gym', 'payment_type', 'payment_method', 'payment_date')
    search_fields = ('student__name', 'student__phone', 'comments')
    raw_id_fields = ('student', 'processed_by')
    date_hierarchy = 'payment_date'
    readonly_fields = ('student', 'amount', 'payment_type', 'payment_method',
                      'gym', 'processed_by', 'payment_date', 'created_at', 'updated_at')

    def has_change_permission(self, request, obj=None):
        # Ledger rows are immutable; deletion goes through the API so the
        # student's cycle is recomputed.
        return False

    def has_delete_permission(self, request, obj=None):
        return False
