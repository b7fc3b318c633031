"""
Jobs App Serializers - Jobs & Containers
"""

from rest_framework import serializers
from .models import Job, Container


class ContainerSerializer(serializers.ModelSerializer):
    """Serializer for a container embedded in a job."""

    class Meta:
        model = Container
        fields = [
            'container_number', 'size',
            'arrival_date', 'container_rail_out_date', 'delivery_date',
            'detention_from', 'do_validity_upto_container_level',
            'empty_container_offload_date', 'rms',
        ]


class JobSerializer(serializers.ModelSerializer):
    """Full serializer for Job, containers in entry order."""

    container_nos = ContainerSerializer(source='containers', many=True, read_only=True)

    class Meta:
        model = Job
        fields = [
            'id', 'job_no', 'year',
            'importer', 'importer_url', 'ie_code_no', 'custom_house',
            'status', 'detailed_status',
            'be_no', 'be_date', 'bill_no', 'out_of_charge', 'discharge_date',
            'description', 'consignment_type', 'cth_no',
            'supplier_exporter', 'port_of_reporting', 'per_kg_cost',
            'container_nos', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class JobListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for job listings."""

    container_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Job
        fields = [
            'id', 'job_no', 'year', 'importer', 'ie_code_no', 'custom_house',
            'status', 'detailed_status', 'be_no', 'be_date', 'out_of_charge',
            'container_count',
        ]
        read_only_fields = fields
