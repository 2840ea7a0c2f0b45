from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Supplier',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('is_active', models.BooleanField(db_index=True, default=True, help_text='Inactive records are archived: hidden from catalogs but kept for history.')),
                ('archived_at', models.DateTimeField(blank=True, null=True)),
                ('name', models.CharField(help_text='Supplier business name', max_length=200)),
                ('contact_person', models.CharField(blank=True, max_length=150)),
                ('phone', models.CharField(blank=True, max_length=50)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('address', models.CharField(blank=True, max_length=255)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('archived_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(app_label)s_%(class)s_archived', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Supplier',
                'verbose_name_plural': 'Suppliers',
                'ordering': ['name'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Insumo',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('is_active', models.BooleanField(db_index=True, default=True, help_text='Inactive records are archived: hidden from catalogs but kept for history.')),
                ('archived_at', models.DateTimeField(blank=True, null=True)),
                ('name', models.CharField(help_text='Ingredient name', max_length=200)),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(blank=True, db_index=True, max_length=100)),
                ('base_unit', models.CharField(help_text="Unit used by recipes, e.g. 'g'", max_length=20)),
                ('purchase_unit', models.CharField(help_text="Unit used for buying and stock, e.g. 'kg'", max_length=20)),
                ('conversion_factor', models.DecimalField(decimal_places=4, default=Decimal('1'), help_text='Base units per purchase unit', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.0001'))])),
                ('unit_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Cost of one purchase unit', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('stock_quantity', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('pending_delivery_quantity', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('pending_reception_quantity', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('min_stock_level', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Purchase suggestions top stock up to this level', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('supplier_name', models.CharField(blank=True, max_length=200)),
                ('supplier_phone', models.CharField(blank=True, max_length=50)),
                ('supplier_address', models.CharField(blank=True, max_length=255)),
                ('last_physical_count_quantity', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('last_physical_count_date', models.DateTimeField(blank=True, null=True)),
                ('discrepancy_quantity', models.DecimalField(blank=True, decimal_places=2, help_text='Last physical count minus recorded stock', max_digits=12, null=True)),
                ('version', models.PositiveIntegerField(default=0, help_text='Incremented on every counter change; used to detect concurrent updates')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('archived_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(app_label)s_%(class)s_archived', to=settings.AUTH_USER_MODEL)),
                ('preferred_supplier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='preferred_for', to='insumos.supplier')),
            ],
            options={
                'verbose_name': 'Insumo',
                'verbose_name_plural': 'Insumos',
                'ordering': ['name'],
                'abstract': False,
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('stock_quantity__gte', 0)), name='insumo_stock_non_negative'),
                    models.CheckConstraint(condition=models.Q(('pending_delivery_quantity__gte', 0)), name='insumo_pending_delivery_non_negative'),
                    models.CheckConstraint(condition=models.Q(('pending_reception_quantity__gte', 0)), name='insumo_pending_reception_non_negative'),
                    models.CheckConstraint(condition=models.Q(('conversion_factor__gt', 0)), name='insumo_conversion_factor_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='InsumoPriceHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('old_unit_cost', models.DecimalField(decimal_places=2, max_digits=12)),
                ('new_unit_cost', models.DecimalField(decimal_places=2, max_digits=12)),
                ('changed_at', models.DateTimeField(auto_now_add=True)),
                ('changed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='insumo_price_changes', to=settings.AUTH_USER_MODEL)),
                ('insumo', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='price_history', to='insumos.insumo')),
            ],
            options={
                'verbose_name': 'Insumo price change',
                'verbose_name_plural': 'Insumo price history',
                'ordering': ['-changed_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='StockMovement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('movement_type', models.CharField(choices=[('order_placed', 'Order placed'), ('reception_in', 'Received by company'), ('purchase_in', 'Received into warehouse'), ('adjustment_in', 'Adjustment in'), ('adjustment_out', 'Adjustment out'), ('daily_prep_out', 'Daily prep out'), ('cancellation_reversal', 'Cancellation reversal')], db_index=True, max_length=30)),
                ('quantity_change', models.DecimalField(decimal_places=2, help_text='Quantity moved, in purchase units (always positive)', max_digits=12)),
                ('pending_delivery_change', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('pending_reception_change', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('stock_change', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('new_stock_quantity', models.DecimalField(decimal_places=2, max_digits=12)),
                ('new_pending_delivery_quantity', models.DecimalField(decimal_places=2, max_digits=12)),
                ('new_pending_reception_quantity', models.DecimalField(decimal_places=2, max_digits=12)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('insumo', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='insumos.insumo')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='stock_movements', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Stock movement',
                'verbose_name_plural': 'Stock movements',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['insumo', '-created_at'], name='stockmove_insumo_created_idx')],
            },
        ),
    ]
