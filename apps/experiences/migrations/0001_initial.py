# Generated migration for Experience, ExperienceSession and Distribution

from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('partners', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Experience',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('title', models.CharField(max_length=255, verbose_name='title')),
                ('slug', models.SlugField(max_length=255, verbose_name='slug')),
                ('description', models.TextField(blank=True, verbose_name='description')),
                ('image_url', models.URLField(blank=True, max_length=500, verbose_name='image URL')),
                ('meeting_point', models.CharField(blank=True, max_length=255, verbose_name='meeting point')),
                ('duration_minutes', models.PositiveIntegerField(default=60, verbose_name='duration (minutes)')),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('active', 'Active'), ('archived', 'Archived')], default='draft', max_length=20, verbose_name='status')),
                ('pricing_type', models.CharField(choices=[('per_person', 'Per Person'), ('base_plus_extra', 'Base Price Plus Extra Person'), ('flat_rate', 'Flat Rate')], default='per_person', max_length=20, verbose_name='pricing type')),
                ('price_cents', models.PositiveIntegerField(default=0, verbose_name='price (cents)')),
                ('base_price_cents', models.PositiveIntegerField(default=0, help_text='Price covering the included participants (base_plus_extra / flat_rate)', verbose_name='base price (cents)')),
                ('extra_person_cents', models.PositiveIntegerField(default=0, help_text='Per-person price (per_person) or price per additional participant (base_plus_extra)', verbose_name='extra person price (cents)')),
                ('included_participants', models.PositiveIntegerField(default=1, verbose_name='included participants')),
                ('min_participants', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)], verbose_name='minimum participants')),
                ('max_participants', models.PositiveIntegerField(default=10, validators=[django.core.validators.MinValueValidator(1)], verbose_name='maximum participants')),
                ('currency', models.CharField(default='EUR', help_text='Currency code (ISO 4217)', max_length=3, verbose_name='currency')),
                ('partner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='experiences', to='partners.partner', verbose_name='supplier')),
            ],
            options={
                'verbose_name': 'experience',
                'verbose_name_plural': 'experiences',
                'ordering': ['title'],
                'unique_together': {('partner', 'slug')},
            },
        ),
        migrations.CreateModel(
            name='ExperienceSession',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('session_date', models.DateField(verbose_name='date')),
                ('start_time', models.TimeField(verbose_name='start time')),
                ('spots_total', models.PositiveIntegerField(verbose_name='total spots')),
                ('spots_available', models.PositiveIntegerField(verbose_name='available spots')),
                ('price_override_cents', models.PositiveIntegerField(blank=True, null=True, verbose_name='price override (cents)')),
                ('status', models.CharField(choices=[('available', 'Available'), ('full', 'Full'), ('booked', 'Booked'), ('cancelled', 'Cancelled')], default='available', max_length=20, verbose_name='status')),
                ('experience', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sessions', to='experiences.experience')),
            ],
            options={
                'verbose_name': 'experience session',
                'verbose_name_plural': 'experience sessions',
                'ordering': ['session_date', 'start_time'],
            },
        ),
        migrations.CreateModel(
            name='Distribution',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('is_active', models.BooleanField(default=True, verbose_name='active')),
                ('sort_order', models.PositiveIntegerField(default=0, verbose_name='sort order')),
                ('commission_supplier', models.PositiveSmallIntegerField(default=80, verbose_name='supplier commission (%)')),
                ('commission_hotel', models.PositiveSmallIntegerField(default=15, verbose_name='hotel commission (%)')),
                ('commission_platform', models.PositiveSmallIntegerField(default=5, verbose_name='platform commission (%)')),
                ('experience', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='distributions', to='experiences.experience')),
                ('hotel', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='distributions', to='partners.partner')),
                ('hotel_config', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='distributions', to='partners.hotelconfig')),
            ],
            options={
                'verbose_name': 'distribution',
                'verbose_name_plural': 'distributions',
                'ordering': ['sort_order'],
                'unique_together': {('hotel', 'experience')},
            },
        ),
    ]
