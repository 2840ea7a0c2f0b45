from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

STATUS_CHOICES = [
    ('ordered', 'Ordered'),
    ('received_by_company', 'Received by company'),
    ('received_by_warehouse', 'Received by warehouse'),
    ('cancelled', 'Cancelled'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('insumos', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PurchaseRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('purchase_date', models.DateField(db_index=True, default=django.utils.timezone.localdate)),
                ('quantity_purchased', models.DecimalField(decimal_places=2, help_text='Quantity ordered, in purchase units', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('quantity_received_by_company', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('quantity_received_by_warehouse', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('unit_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('supplier_name', models.CharField(blank=True, max_length=200)),
                ('supplier_phone', models.CharField(blank=True, max_length=50)),
                ('supplier_address', models.CharField(blank=True, max_length=255)),
                ('from_registered_supplier', models.BooleanField(default=False)),
                ('notes', models.TextField(blank=True)),
                ('status', models.CharField(choices=STATUS_CHOICES, db_index=True, default='ordered', max_length=30)),
                ('received_date', models.DateTimeField(blank=True, help_text='First reception at any stage', null=True)),
                ('cancelled_from_status', models.CharField(blank=True, choices=STATUS_CHOICES, max_length=30)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('cancellation_reason', models.TextField(blank=True)),
                ('version', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('insumo', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchase_records', to='insumos.insumo')),
                ('purchased_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='purchase_records', to=settings.AUTH_USER_MODEL)),
                ('supplier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='purchase_records', to='insumos.supplier')),
            ],
            options={
                'verbose_name': 'Purchase record',
                'verbose_name_plural': 'Purchase records',
                'ordering': ['-purchase_date', '-id'],
                'indexes': [models.Index(fields=['insumo', 'status'], name='purchase_insumo_status_idx')],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity_purchased__gt', 0)), name='purchase_quantity_positive'),
                    models.CheckConstraint(condition=models.Q(('quantity_received_by_warehouse__gte', 0)), name='purchase_warehouse_received_non_negative'),
                    models.CheckConstraint(condition=models.Q(('quantity_received_by_warehouse__lte', models.F('quantity_received_by_company'))), name='purchase_warehouse_within_company'),
                    models.CheckConstraint(condition=models.Q(('quantity_received_by_company__lte', models.F('quantity_purchased'))), name='purchase_company_within_purchased'),
                ],
            },
        ),
    ]
