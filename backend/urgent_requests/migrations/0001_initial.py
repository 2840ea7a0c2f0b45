from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('insumos', '0001_initial'),
        ('purchasing', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='UrgentPurchaseRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity_requested', models.DecimalField(decimal_places=2, help_text='Quantity requested, in purchase units', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('request_date', models.DateField(default=django.utils.timezone.localdate)),
                ('notes', models.TextField(blank=True)),
                ('source_module', models.CharField(default='warehouse', max_length=50)),
                ('priority', models.CharField(choices=[('urgent', 'Urgent'), ('high', 'High'), ('medium', 'Medium'), ('low', 'Low')], db_index=True, default='urgent', max_length=10)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected'), ('fulfilled', 'Fulfilled')], db_index=True, default='pending', max_length=10)),
                ('rejection_reason', models.TextField(blank=True)),
                ('insistence_count', models.PositiveIntegerField(default=0, help_text='Times this shortage was requested again while the request was open')),
                ('resolved_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('fulfilled_purchase_record', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='urgent_requests', to='purchasing.purchaserecord')),
                ('insumo', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='urgent_requests', to='insumos.insumo')),
                ('requested_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='urgent_purchase_requests', to=settings.AUTH_USER_MODEL)),
                ('resolved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='resolved_urgent_purchase_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Urgent purchase request',
                'verbose_name_plural': 'Urgent purchase requests',
                'ordering': ['-request_date', '-id'],
                'indexes': [models.Index(fields=['insumo', 'status'], name='urgent_insumo_status_idx')],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity_requested__gt', 0)), name='urgent_request_quantity_positive'),
                    models.CheckConstraint(condition=models.Q(models.Q(('status', 'rejected'), _negated=True), models.Q(('rejection_reason', ''), _negated=True), _connector='OR'), name='urgent_request_rejection_has_reason'),
                    models.CheckConstraint(condition=models.Q(models.Q(('status', 'fulfilled'), _negated=True), ('fulfilled_purchase_record__isnull', False), _connector='OR'), name='urgent_request_fulfilled_has_record'),
                ],
            },
        ),
    ]
