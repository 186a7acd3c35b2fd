from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('experiences', '0001_initial'),
    ]

    operations = [
        migrations.AddConstraint(
            model_name='distribution',
            constraint=models.CheckConstraint(
                check=models.Q(
                    commission_supplier=100 - models.F('commission_hotel') - models.F('commission_platform')
                ),
                name='distribution_commissions_sum_100',
            ),
        ),
    ]
