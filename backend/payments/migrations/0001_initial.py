import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('orders', '0001_initial'),
        ('venues', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('tip_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('payment_method', models.CharField(choices=[('card', 'Card'), ('cash', 'Cash'), ('check', 'Check'), ('gift_card', 'Gift Card'), ('comp', 'Comp')], max_length=20)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed'), ('failed', 'Failed'), ('refunded', 'Refunded')], default='pending', max_length=20)),
                ('processed_by', models.CharField(blank=True, help_text='Staff member who took the payment.', max_length=64)),
                ('card_last_four', models.CharField(blank=True, max_length=4, validators=[django.core.validators.RegexValidator('^\\d{4}$', 'Card last four must be exactly 4 digits')])),
                ('card_brand', models.CharField(blank=True, max_length=20)),
                ('processor', models.CharField(blank=True, max_length=50)),
                ('processor_transaction_id', models.CharField(blank=True, db_index=True, max_length=255)),
                ('processor_fee', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('comp_reason', models.TextField(blank=True)),
                ('comp_by', models.CharField(blank=True, help_text='Manager who approved the comp.', max_length=64)),
                ('is_refunded', models.BooleanField(default=False)),
                ('refund_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('refund_reason', models.TextField(blank=True)),
                ('refunded_at', models.DateTimeField(blank=True, null=True)),
                ('refunded_by', models.CharField(blank=True, max_length=64)),
                ('refund_transaction_id', models.CharField(blank=True, max_length=255)),
                ('processed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payments', to='orders.order')),
                ('venue', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='venues.venue')),
            ],
            options={
                'verbose_name': 'Payment',
                'verbose_name_plural': 'Payments',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['venue', 'created_at'], name='payment_venue_created_idx'),
                    models.Index(fields=['order', 'status'], name='payment_order_status_idx'),
                    models.Index(fields=['venue', 'payment_method'], name='payment_venue_method_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('refund_amount__isnull', True), ('refund_amount__lte', models.F('amount')), _connector='OR'), name='payment_refund_lte_amount'),
                ],
            },
        ),
    ]
