# Generated migration for Reservation

from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('partners', '0001_initial'),
        ('experiences', '0001_initial'),
        ('payouts', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Reservation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('guest_name', models.CharField(max_length=200, verbose_name='guest name')),
                ('guest_email', models.EmailField(max_length=320, verbose_name='guest email')),
                ('guest_phone', models.CharField(blank=True, max_length=200, verbose_name='guest phone')),
                ('participants', models.PositiveIntegerField(verbose_name='participants')),
                ('total_cents', models.PositiveIntegerField(verbose_name='total (cents)')),
                ('currency', models.CharField(default='EUR', max_length=3, verbose_name='currency')),
                ('is_request', models.BooleanField(default=False, verbose_name='is request')),
                ('requested_date', models.DateField(blank=True, null=True, verbose_name='requested date')),
                ('requested_time', models.TimeField(blank=True, null=True, verbose_name='requested time')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('declined', 'Declined'), ('pending_payment', 'Pending payment'), ('completed', 'Completed'), ('cancelled', 'Cancelled'), ('expired', 'Expired')], db_index=True, default='pending', max_length=20, verbose_name='status')),
                ('response_deadline', models.DateTimeField(blank=True, db_index=True, null=True, verbose_name='response deadline')),
                ('payment_deadline', models.DateTimeField(blank=True, null=True, verbose_name='payment deadline')),
                ('decline_reason', models.TextField(blank=True, verbose_name='decline reason')),
                ('stripe_payment_link_id', models.CharField(blank=True, max_length=255)),
                ('stripe_payment_link_url', models.URLField(blank=True, max_length=500)),
                ('stripe_payment_intent_id', models.CharField(blank=True, max_length=255)),
                ('stripe_charge_id', models.CharField(blank=True, max_length=255)),
                ('stripe_refund_id', models.CharField(blank=True, max_length=255)),
                ('stripe_transfer_id', models.CharField(blank=True, max_length=255)),
                ('supplier_amount_cents', models.PositiveIntegerField(blank=True, null=True)),
                ('hotel_amount_cents', models.PositiveIntegerField(blank=True, null=True)),
                ('platform_amount_cents', models.PositiveIntegerField(blank=True, null=True)),
                ('settlement_error', models.TextField(blank=True, verbose_name='last settlement error')),
                ('settlement_attempts', models.PositiveIntegerField(default=0, verbose_name='settlement attempts')),
                ('confirmed_at', models.DateTimeField(blank=True, null=True)),
                ('declined_at', models.DateTimeField(blank=True, null=True)),
                ('paid_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('experience', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='reservations', to='experiences.experience')),
                ('hotel', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='hotel_reservations', to='partners.partner')),
                ('hotel_config', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reservations', to='partners.hotelconfig')),
                ('session', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reservations', to='experiences.experiencesession')),
                ('hotel_payout', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reservations', to='payouts.hotelpayout')),
            ],
            options={
                'verbose_name': 'reservation',
                'verbose_name_plural': 'reservations',
                'ordering': ['-created_at'],
            },
        ),
    ]
