# sales/admin.py
from django.contrib import admin

from .models import Sale, SaleItem, Installment


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    can_delete = False
    readonly_fields = ('product', 'location', 'quantity', 'unit_price')


class InstallmentInline(admin.TabularInline):
    model = Installment
    extra = 0
    can_delete = False
    readonly_fields = ('sequence', 'amount', 'due_date')
    fields = ('sequence', 'amount', 'due_date', 'paid', 'paid_date')


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ('id', 'gym', 'payment_method', 'total', 'customer', 'processed_by', 'sale_date')
    list_filter = ('gym', 'payment_method', 'sale_date')
    search_fields = ('customer__name', 'customer__phone', 'items__product__name')
    raw_id_fields = ('customer', 'processed_by')
    date_hierarchy = 'sale_date'
    readonly_fields = ('gym', 'payment_method', 'total', 'customer', 'processed_by',
                      'sale_date', 'created_at', 'updated_at')
    inlines = [SaleItemInline, InstallmentInline]

    def has_add_permission(self, request):
        # Sales must go through the API so stock is decremented
        return False

    def has_delete_permission(self, request, obj=None):
        return False
