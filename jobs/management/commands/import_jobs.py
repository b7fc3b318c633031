"""
Django management command to load jobs from a JSON export.

Accepts either a list of job documents or {"jobs": [...]}, in the shape
produced by the operations database export (container_nos,
emptyContainerOffLoadDate, net_weight_calculator.per_kg_cost, {"$date": ...}).

Usage:
    python manage.py import_jobs exports/jobs-25-26.json
    python manage.py import_jobs exports/jobs.json --year 25-26
"""
import json
import logging

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from jobs.models import Job, Container, JobStatus

logger = logging.getLogger(__name__)


JOB_FIELDS = [
    'importer', 'ie_code_no', 'custom_house', 'detailed_status',
    'be_no', 'bill_no', 'description', 'consignment_type', 'cth_no',
    'supplier_exporter', 'port_of_reporting',
    'be_date', 'out_of_charge', 'discharge_date',
]

# export key -> model field
CONTAINER_FIELDS = {
    'container_number': 'container_number',
    'size': 'size',
    'arrival_date': 'arrival_date',
    'container_rail_out_date': 'container_rail_out_date',
    'delivery_date': 'delivery_date',
    'detention_from': 'detention_from',
    'do_validity_upto_container_level': 'do_validity_upto_container_level',
    'emptyContainerOffLoadDate': 'empty_container_offload_date',
    'rms': 'rms',
}


def as_text(value) -> str:
    """Flatten an exported scalar (including {"$date": ...}) to a string."""
    if value is None:
        return ''
    if isinstance(value, dict):
        value = value.get('$date', '')
    return str(value).strip()


def job_defaults(doc: dict) -> dict:
    defaults = {field: as_text(doc.get(field)) for field in JOB_FIELDS}

    status = as_text(doc.get('status'))
    defaults['status'] = status if status in JobStatus.values else JobStatus.PENDING

    calculator = doc.get('net_weight_calculator') or {}
    defaults['per_kg_cost'] = as_text(calculator.get('per_kg_cost') or doc.get('per_kg_cost'))
    return defaults


def container_values(doc: dict) -> dict:
    values = {field: as_text(doc.get(key)) for key, field in CONTAINER_FIELDS.items()}
    values['rms'] = values['rms'] or 'no'
    return values


class Command(BaseCommand):
    help = 'Import jobs and their containers from a JSON export'

    def add_arguments(self, parser):
        parser.add_argument('path', help='JSON file to import')
        parser.add_argument(
            '--year',
            help='Financial year to use when a document has none (e.g. 25-26)',
        )

    def handle(self, *args, **options):
        path = options['path']
        try:
            with open(path, encoding='utf-8') as fh:
                payload = json.load(fh)
        except OSError as e:
            raise CommandError(f"Cannot read {path}: {e}")
        except json.JSONDecodeError as e:
            raise CommandError(f"Invalid JSON in {path}: {e}")

        if isinstance(payload, dict):
            payload = payload.get('jobs', [])
        if not isinstance(payload, list):
            raise CommandError('Expected a list of jobs or an object with a "jobs" list')

        created_count = updated_count = skipped_count = 0

        with transaction.atomic():
            for doc in payload:
                if not isinstance(doc, dict):
                    skipped_count += 1
                    continue

                job_no = as_text(doc.get('job_no'))
                year = as_text(doc.get('year')) or (options.get('year') or '')
                if not job_no or not year:
                    skipped_count += 1
                    self.stdout.write(f'⏭️  Skipped document without job_no/year: {job_no or "?"}')
                    continue

                job, created = Job.objects.update_or_create(
                    year=year,
                    job_no=job_no,
                    defaults=job_defaults(doc),
                )
                job.containers.all().delete()
                Container.objects.bulk_create([
                    Container(job=job, position=position, **container_values(container))
                    for position, container in enumerate(doc.get('container_nos') or [])
                    if isinstance(container, dict)
                ])

                if created:
                    created_count += 1
                else:
                    updated_count += 1

        logger.info(
            f"[IMPORT] {path}: {created_count} created, "
            f"{updated_count} updated, {skipped_count} skipped"
        )
        self.stdout.write(self.style.SUCCESS(
            f'\n🎉 Import done: {created_count} created, '
            f'{updated_count} updated, {skipped_count} skipped'
        ))
