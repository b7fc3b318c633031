import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Job',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('job_no', models.CharField(max_length=50, verbose_name='Job number')),
                ('year', models.CharField(db_index=True, max_length=10, verbose_name='Financial year')),
                ('importer', models.CharField(blank=True, db_index=True, max_length=255)),
                ('importer_url', models.CharField(blank=True, db_index=True, editable=False, max_length=255)),
                ('ie_code_no', models.CharField(blank=True, db_index=True, max_length=20, verbose_name='IE code')),
                ('custom_house', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('Completed', 'Completed'), ('Cancelled', 'Cancelled')], default='Pending', max_length=20)),
                ('detailed_status', models.CharField(blank=True, max_length=100)),
                ('be_no', models.CharField(blank=True, max_length=50, verbose_name='Bill of Entry number')),
                ('bill_no', models.CharField(blank=True, max_length=50)),
                ('description', models.TextField(blank=True, verbose_name='Commodity description')),
                ('consignment_type', models.CharField(blank=True, max_length=20)),
                ('cth_no', models.CharField(blank=True, max_length=20, verbose_name='HS code')),
                ('supplier_exporter', models.CharField(blank=True, max_length=255)),
                ('port_of_reporting', models.CharField(blank=True, max_length=100)),
                ('per_kg_cost', models.CharField(blank=True, max_length=30)),
                ('be_date', models.CharField(blank=True, max_length=30, verbose_name='BE date')),
                ('out_of_charge', models.CharField(blank=True, max_length=30, verbose_name='Out of charge date')),
                ('discharge_date', models.CharField(blank=True, max_length=30)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Job',
                'verbose_name_plural': 'Jobs',
                'ordering': ['-year', 'job_no'],
            },
        ),
        migrations.CreateModel(
            name='Container',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('position', models.PositiveIntegerField(default=0)),
                ('container_number', models.CharField(blank=True, max_length=20)),
                ('size', models.CharField(blank=True, choices=[('20', '20 ft'), ('40', '40 ft')], max_length=2)),
                ('arrival_date', models.CharField(blank=True, max_length=30)),
                ('container_rail_out_date', models.CharField(blank=True, max_length=30)),
                ('delivery_date', models.CharField(blank=True, max_length=30)),
                ('detention_from', models.CharField(blank=True, max_length=30)),
                ('do_validity_upto_container_level', models.CharField(blank=True, max_length=30, verbose_name='DO validity (container level)')),
                ('empty_container_offload_date', models.CharField(blank=True, max_length=30)),
                ('rms', models.CharField(blank=True, default='no', max_length=3, verbose_name='RMS')),
                ('job', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='containers', to='jobs.job')),
            ],
            options={
                'verbose_name': 'Container',
                'verbose_name_plural': 'Containers',
                'ordering': ['job', 'position'],
            },
        ),
        migrations.AddConstraint(
            model_name='job',
            constraint=models.UniqueConstraint(fields=('year', 'job_no'), name='unique_job_no_per_year'),
        ),
    ]
