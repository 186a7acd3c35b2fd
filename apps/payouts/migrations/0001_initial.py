# Generated migration for HotelPayout

from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('partners', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='HotelPayout',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('period_start', models.DateField(verbose_name='period start')),
                ('period_end', models.DateField(verbose_name='period end')),
                ('amount_cents', models.PositiveIntegerField(verbose_name='amount (cents)')),
                ('currency', models.CharField(default='EUR', max_length=3, verbose_name='currency')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('paid', 'Paid')], db_index=True, default='pending', max_length=20, verbose_name='status')),
                ('payment_ref', models.CharField(blank=True, max_length=255, verbose_name='payment reference')),
                ('payment_method', models.CharField(blank=True, max_length=100, verbose_name='payment method')),
                ('notes', models.TextField(blank=True, verbose_name='notes')),
                ('paid_at', models.DateTimeField(blank=True, null=True, verbose_name='paid at')),
                ('created_by', models.CharField(default='admin', max_length=100, verbose_name='created by')),
                ('partner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='hotel_payouts', to='partners.partner')),
            ],
            options={
                'verbose_name': 'hotel payout',
                'verbose_name_plural': 'hotel payouts',
                'ordering': ['-created_at'],
            },
        ),
    ]
