# inventory/admin.py
from django.contrib import admin

from .models import Product, ProductStock


class ProductStockInline(admin.TabularInline):
    model = ProductStock
    extra = 0
    can_delete = False
    readonly_fields = ('gym', 'quantity', 'updated_at')

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'type', 'price', 'allow_installments', 'created_at')
    list_filter = ('type', 'allow_installments')
    search_fields = ('name', 'description')
    inlines = [ProductStockInline]


@admin.register(ProductStock)
class ProductStockAdmin(admin.ModelAdmin):
    list_display = ('product', 'gym', 'quantity', 'updated_at')
    list_filter = ('gym',)
    search_fields = ('product__name',)
    readonly_fields = ('product', 'gym', 'quantity', 'updated_at')

    def has_add_permission(self, request):
        return False
