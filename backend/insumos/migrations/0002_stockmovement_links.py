import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('insumos', '0001_initial'),
        ('menus', '0001_initial'),
        ('purchasing', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='stockmovement',
            name='menu',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='stock_movements', to='menus.menu'),
        ),
        migrations.AddField(
            model_name='stockmovement',
            name='purchase_record',
            field=models.ForeignKey(blank=True, help_text='Purchase record that caused this movement, if any', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='stock_movements', to='purchasing.purchaserecord'),
        ),
    ]
