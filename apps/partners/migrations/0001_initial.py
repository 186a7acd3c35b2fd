# Generated migration for Partner, PartnerMember and HotelConfig

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Partner',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('name', models.CharField(max_length=255, verbose_name='name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email')),
                ('partner_type', models.CharField(choices=[('supplier', 'Supplier'), ('hotel', 'Hotel')], default='supplier', max_length=20, verbose_name='partner type')),
                ('stripe_account_id', models.CharField(blank=True, help_text='Connected account receiving supplier transfers (set after onboarding)', max_length=255, null=True, verbose_name='Stripe account ID')),
                ('stripe_onboarding_complete', models.BooleanField(default=False, verbose_name='Stripe onboarding complete')),
            ],
            options={
                'verbose_name': 'partner',
                'verbose_name_plural': 'partners',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='HotelConfig',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('slug', models.SlugField(unique=True, verbose_name='slug')),
                ('display_name', models.CharField(max_length=255, verbose_name='display name')),
                ('is_active', models.BooleanField(default=True, verbose_name='active')),
                ('default_currency', models.CharField(default='EUR', max_length=3, verbose_name='currency')),
                ('accent_color', models.CharField(default='#0f766e', max_length=20, verbose_name='accent color')),
                ('text_color', models.CharField(default='#111827', max_length=20, verbose_name='text color')),
                ('background_color', models.CharField(default='#ffffff', max_length=20, verbose_name='background color')),
                ('font_family', models.CharField(default='system-ui', max_length=100, verbose_name='font family')),
                ('title', models.CharField(blank=True, max_length=255, verbose_name='widget title')),
                ('partner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='hotel_configs', to='partners.partner')),
            ],
            options={
                'verbose_name': 'hotel configuration',
                'verbose_name_plural': 'hotel configurations',
            },
        ),
        migrations.CreateModel(
            name='PartnerMember',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('is_admin', models.BooleanField(default=False, verbose_name='admin')),
                ('partner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='members', to='partners.partner')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='partner_memberships', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'unique_together': {('partner', 'user')},
            },
        ),
    ]
