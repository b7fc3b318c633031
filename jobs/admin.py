"""
Django Admin configuration for JOBS app.
"""

from django.contrib import admin
from .models import Job, Container


class ContainerInline(admin.TabularInline):
    model = Container
    extra = 0
    ordering = ('position',)
    fields = (
        'position', 'container_number', 'size',
        'arrival_date', 'container_rail_out_date', 'delivery_date',
        'detention_from', 'do_validity_upto_container_level',
        'empty_container_offload_date', 'rms',
    )


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    """Admin for customs jobs with their containers inline."""

    list_display = (
        'job_no',
        'year',
        'importer',
        'ie_code_no',
        'custom_house',
        'status',
        'detailed_status',
        'container_count',
        'out_of_charge',
    )
    list_filter = ('year', 'status', 'detailed_status', 'custom_house')
    search_fields = ('job_no', 'importer', 'ie_code_no', 'be_no', 'containers__container_number')
    ordering = ('-year', 'job_no')
    readonly_fields = ('importer_url', 'created_at', 'updated_at')
    inlines = [ContainerInline]

    fieldsets = (
        ('Identity', {
            'fields': ('job_no', 'year', 'status', 'detailed_status')
        }),
        ('Importer', {
            'fields': ('importer', 'importer_url', 'ie_code_no', 'custom_house', 'port_of_reporting')
        }),
        ('Customs', {
            'fields': (
                'be_no', 'be_date', 'bill_no', 'out_of_charge', 'discharge_date',
                'description', 'consignment_type', 'cth_no', 'supplier_exporter', 'per_kg_cost',
            )
        }),
        ('Audit', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.display(description='Containers')
    def container_count(self, obj):
        return obj.containers.count()
