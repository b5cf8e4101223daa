import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('venues', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('order_number', models.PositiveIntegerField(blank=True, editable=False, null=True)),
                ('business_date', models.DateField(editable=False, help_text='Venue-local date the order number sequence belongs to.')),
                ('server_id', models.CharField(blank=True, help_text='Staff member who owns the tab.', max_length=64)),
                ('table_number', models.CharField(blank=True, max_length=20)),
                ('guest_count', models.PositiveIntegerField(default=1)),
                ('order_type', models.CharField(choices=[('dine_in', 'Dine In'), ('takeout', 'Takeout'), ('delivery', 'Delivery'), ('bar', 'Bar')], default='dine_in', max_length=10)),
                ('status', models.CharField(choices=[('open', 'Open'), ('sent', 'Sent'), ('completed', 'Completed'), ('cancelled', 'Cancelled'), ('voided', 'Voided')], default='open', max_length=10)),
                ('subtotal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('tax', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('tip', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('discount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('sent_at', models.DateTimeField(blank=True, editable=False, null=True)),
                ('completed_at', models.DateTimeField(blank=True, db_index=True, editable=False, help_text='Set only when the order is completed.', null=True)),
                ('venue', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='orders', to='venues.venue')),
            ],
            options={
                'verbose_name': 'Order',
                'verbose_name_plural': 'Orders',
                'ordering': ['-created_at', '-order_number'],
                'indexes': [
                    models.Index(fields=['venue', 'status'], name='order_venue_stat_idx'),
                    models.Index(fields=['venue', 'created_at'], name='order_venue_created_idx'),
                    models.Index(fields=['venue', 'server_id'], name='order_venue_server_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('order_number__isnull', False)), fields=('venue', 'business_date', 'order_number'), name='unique_order_number_per_venue_day'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderNumberSequence',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('business_date', models.DateField()),
                ('last_number', models.PositiveIntegerField(default=0)),
                ('venue', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='order_number_sequences', to='venues.venue')),
            ],
            options={
                'constraints': [
                    models.UniqueConstraint(fields=('venue', 'business_date'), name='unique_order_sequence_per_venue_day'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('menu_item_id', models.UUIDField(blank=True, help_text='Catalog reference. Name and price below are snapshots.', null=True)),
                ('name', models.CharField(max_length=200)),
                ('price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('modifier_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('notes', models.TextField(blank=True, help_text="Guest notes, e.g., 'no onions'")),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('sent', 'Sent to Kitchen'), ('preparing', 'Preparing'), ('ready', 'Ready for Pickup'), ('delivered', 'Delivered')], default='pending', max_length=10)),
                ('sent_to_kitchen_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='orders.order')),
                ('venue', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='order_items', to='venues.venue')),
            ],
            options={
                'verbose_name': 'Order Item',
                'verbose_name_plural': 'Order Items',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['venue', 'order'], name='item_venue_order_idx'),
                    models.Index(fields=['venue', 'status'], name='item_venue_stat_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderItemModifier',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('modifier_id', models.UUIDField(blank=True, null=True)),
                ('name', models.CharField(max_length=100)),
                ('price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('order_item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='modifiers', to='orders.orderitem')),
                ('venue', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='order_item_modifiers', to='venues.venue')),
            ],
            options={
                'indexes': [
                    models.Index(fields=['venue', 'order_item'], name='item_mod_venue_item_idx'),
                ],
            },
        ),
    ]
