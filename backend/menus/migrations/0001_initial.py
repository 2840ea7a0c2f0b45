from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('recipes', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='EventType',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('description', models.TextField(blank=True)),
            ],
            options={
                'verbose_name': 'Event type',
                'verbose_name_plural': 'Event types',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='MealService',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('description', models.TextField(blank=True)),
                ('sort_order', models.PositiveIntegerField(default=0, help_text='Display order within the day')),
            ],
            options={
                'verbose_name': 'Meal service',
                'verbose_name_plural': 'Meal services',
                'ordering': ['sort_order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Menu',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('menu_date', models.DateField(db_index=True)),
                ('menu_type', models.CharField(choices=[('daily', 'Daily'), ('event', 'Event')], default='daily', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('event_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='menus', to='menus.eventtype')),
            ],
            options={
                'verbose_name': 'Menu',
                'verbose_name_plural': 'Menus',
                'ordering': ['-menu_date', 'title'],
            },
        ),
        migrations.CreateModel(
            name='MenuPlato',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('dish_category', models.CharField(blank=True, max_length=100)),
                ('quantity_needed', models.DecimalField(decimal_places=2, help_text='Number of servings', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('meal_service', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='menu_platos', to='menus.mealservice')),
                ('menu', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='menu_platos', to='menus.menu')),
                ('plato', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='menu_platos', to='recipes.plato')),
            ],
            options={
                'verbose_name': 'Menu dish',
                'verbose_name_plural': 'Menu dishes',
                'ordering': ['meal_service__sort_order', 'id'],
            },
        ),
    ]
