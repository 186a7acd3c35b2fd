from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('reservations', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='reservation',
            name='proposed_times',
            field=models.JSONField(blank=True, default=list, verbose_name='proposed times'),
        ),
        migrations.AddField(
            model_name='reservation',
            name='completion_check_sent_at',
            field=models.DateTimeField(blank=True, null=True),
        ),
        migrations.AlterField(
            model_name='reservation',
            name='status',
            field=models.CharField(choices=[('pending', 'Pending'), ('proposed', 'Times proposed'), ('confirmed', 'Confirmed'), ('declined', 'Declined'), ('pending_payment', 'Pending payment'), ('completed', 'Completed'), ('cancelled', 'Cancelled'), ('expired', 'Expired')], db_index=True, default='pending', max_length=20, verbose_name='status'),
        ),
    ]
