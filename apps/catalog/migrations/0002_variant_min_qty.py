from django.db import migrations, models


def _min_qty():
    return models.PositiveIntegerField(
        default=10,
        help_text='Low stock at or below this quantity',
        verbose_name='Minimum quantity',
    )


class Migration(migrations.Migration):

    dependencies = [
        ('catalog', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='variant',
            name='min_qty',
            field=_min_qty(),
        ),
        migrations.AddField(
            model_name='historicalvariant',
            name='min_qty',
            field=_min_qty(),
        ),
    ]
