import django.core.validators
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='CropStage',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('crop_name', models.CharField(max_length=100, unique=True)),
                ('stages', models.JSONField(default=list, help_text='Ordered growth-stage labels')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Crop Stage',
                'verbose_name_plural': 'Crop Stages',
                'db_table': 'crop_stages',
                'ordering': ['crop_name'],
            },
        ),
        migrations.CreateModel(
            name='FarmVisit',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('farmer_name', models.CharField(max_length=200)),
                ('farm_id', models.CharField(db_index=True, max_length=100)),
                ('phone_number', models.CharField(max_length=30)),
                ('village_location', models.CharField(max_length=200)),
                ('gps_coordinates', models.CharField(blank=True, default='', help_text='Free-form GPS reading, e.g. 0.3476° N, 32.5825° E', max_length=100)),
                ('farm_size_acres', models.DecimalField(decimal_places=2, default=0, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('farm_type', models.CharField(choices=[('Crop', 'Crop'), ('Livestock', 'Livestock'), ('Mixed', 'Mixed')], default='Crop', max_length=20)),
                ('visit_date', models.DateField()),
                ('visit_type', models.CharField(choices=[('Routine', 'Routine'), ('Emergency', 'Emergency'), ('Follow-up', 'Follow-up')], db_index=True, default='Routine', max_length=20)),
                ('officer_name', models.CharField(max_length=200)),
                ('time_spent_hours', models.DecimalField(decimal_places=2, default=0, max_digits=6, validators=[django.core.validators.MinValueValidator(0)])),
                ('main_crops', models.CharField(blank=True, default='', max_length=200)),
                ('crop_stage', models.CharField(blank=True, default='', max_length=100)),
                ('crop_issues', models.JSONField(blank=True, default=list, help_text='Subset of: Pests, Diseases, Nutrient Deficiency, Poor Germination, Water Stress')),
                ('livestock_type', models.CharField(blank=True, default='', max_length=200)),
                ('number_of_animals', models.PositiveIntegerField(default=0)),
                ('livestock_issues', models.JSONField(blank=True, default=list, help_text='Subset of: Illness, Parasites, Malnutrition, Poor Housing')),
                ('photo_urls', models.JSONField(blank=True, default=list, help_text='Ordered photo URLs (legacy single photo_url is folded in on submission)')),
                ('video_link', models.URLField(blank=True, default='', max_length=500)),
                ('advice_given', models.TextField()),
                ('follow_up_needed', models.BooleanField(default=False)),
                ('proposed_follow_up_date', models.DateField(blank=True, null=True)),
                ('routine_check', models.BooleanField(default=False)),
                ('routine_check_date', models.DateField(blank=True, null=True)),
                ('training_needed', models.BooleanField(default=False)),
                ('referral_to_specialist', models.CharField(blank=True, default='', max_length=255)),
                ('additional_notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                'verbose_name': 'Farm Visit',
                'verbose_name_plural': 'Farm Visits',
                'db_table': 'farm_visits',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['visit_type', 'created_at'], name='farm_visit_type_created_idx')],
            },
        ),
    ]
