from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('insumos', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Plato',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(blank=True, db_index=True, max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Plato',
                'verbose_name_plural': 'Platos',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='PlatoInsumo',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity_needed', models.DecimalField(decimal_places=4, help_text="Quantity per serving, in the ingredient's base unit", max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.0001'))])),
                ('insumo', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='plato_insumos', to='insumos.insumo')),
                ('plato', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='plato_insumos', to='recipes.plato')),
            ],
            options={
                'verbose_name': 'Recipe ingredient',
                'verbose_name_plural': 'Recipe ingredients',
                'constraints': [models.UniqueConstraint(fields=('plato', 'insumo'), name='unique_plato_insumo')],
            },
        ),
        migrations.AddField(
            model_name='plato',
            name='insumos',
            field=models.ManyToManyField(related_name='platos', through='recipes.PlatoInsumo', to='insumos.insumo'),
        ),
    ]
