"""
JOBS App - Shipment records for EXIM Desk

Handles: Jobs (one import/export shipment) and their Containers
"""

import re
import uuid
from django.db import models


class JobStatus(models.TextChoices):
    """Job lifecycle status."""
    PENDING = 'Pending', 'Pending'
    COMPLETED = 'Completed', 'Completed'
    CANCELLED = 'Cancelled', 'Cancelled'


class ContainerSize(models.TextChoices):
    """ISO container sizes handled at the port."""
    FT20 = '20', '20 ft'
    FT40 = '40', '40 ft'


# Twenty-foot equivalent units per container size
TEU_BY_SIZE = {
    ContainerSize.FT20: 1,
    ContainerSize.FT40: 2,
}


def format_importer(importer: str) -> str:
    """
    Build the URL slug used by the dashboard for an importer name.

    Example: "Acme Metals Pvt. Ltd." -> "acme_metals_pvt_ltd"
    """
    slug = re.sub(r'\s+', '_', (importer or '').lower())
    slug = re.sub(r'[.\-/,()\[\]]', '', slug)
    return re.sub(r'_+', '_', slug)


class Job(models.Model):
    """
    Customs job (one shipment).

    Date fields are kept as the strings entered by operations staff and
    parsed on demand by the analytics layer.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Identity
    job_no = models.CharField(max_length=50, verbose_name="Job number")
    year = models.CharField(max_length=10, db_index=True, verbose_name="Financial year")

    # Classification
    importer = models.CharField(max_length=255, blank=True, db_index=True)
    importer_url = models.CharField(max_length=255, blank=True, db_index=True, editable=False)
    ie_code_no = models.CharField(max_length=20, blank=True, db_index=True, verbose_name="IE code")
    custom_house = models.CharField(max_length=100, blank=True)
    status = models.CharField(
        max_length=20,
        choices=JobStatus.choices,
        default=JobStatus.PENDING,
    )
    detailed_status = models.CharField(max_length=100, blank=True)

    # Customs documents
    be_no = models.CharField(max_length=50, blank=True, verbose_name="Bill of Entry number")
    bill_no = models.CharField(max_length=50, blank=True)
    description = models.TextField(blank=True, verbose_name="Commodity description")
    consignment_type = models.CharField(max_length=20, blank=True)
    cth_no = models.CharField(max_length=20, blank=True, verbose_name="HS code")
    supplier_exporter = models.CharField(max_length=255, blank=True)
    port_of_reporting = models.CharField(max_length=100, blank=True)
    per_kg_cost = models.CharField(max_length=30, blank=True)

    # Dates (raw strings)
    be_date = models.CharField(max_length=30, blank=True, verbose_name="BE date")
    out_of_charge = models.CharField(max_length=30, blank=True, verbose_name="Out of charge date")
    discharge_date = models.CharField(max_length=30, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Job"
        verbose_name_plural = "Jobs"
        ordering = ['-year', 'job_no']
        constraints = [
            models.UniqueConstraint(fields=['year', 'job_no'], name='unique_job_no_per_year'),
        ]

    def __str__(self):
        return f"{self.job_no} ({self.year})"

    def save(self, *args, **kwargs):
        self.importer_url = format_importer(self.importer)
        super().save(*args, **kwargs)


class Container(models.Model):
    """Container carried by a job, kept in the order it was entered."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    job = models.ForeignKey(
        Job,
        on_delete=models.CASCADE,
        related_name='containers',
    )
    position = models.PositiveIntegerField(default=0)

    container_number = models.CharField(max_length=20, blank=True)
    size = models.CharField(max_length=2, choices=ContainerSize.choices, blank=True)

    # Lifecycle dates (raw strings)
    arrival_date = models.CharField(max_length=30, blank=True)
    container_rail_out_date = models.CharField(max_length=30, blank=True)
    delivery_date = models.CharField(max_length=30, blank=True)
    detention_from = models.CharField(max_length=30, blank=True)
    do_validity_upto_container_level = models.CharField(
        max_length=30,
        blank=True,
        verbose_name="DO validity (container level)",
    )
    empty_container_offload_date = models.CharField(max_length=30, blank=True)

    rms = models.CharField(max_length=3, blank=True, default='no', verbose_name="RMS")

    class Meta:
        verbose_name = "Container"
        verbose_name_plural = "Containers"
        ordering = ['job', 'position']

    def __str__(self):
        return f"{self.container_number or '?'} [{self.size or '-'}]"

    @property
    def teus(self) -> int:
        """Twenty-foot equivalent units (unknown sizes count as 0)."""
        return TEU_BY_SIZE.get(self.size, 0)
