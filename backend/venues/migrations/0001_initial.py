import uuid
from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Venue',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(help_text='URL-safe identifier accepted in the venue header (e.g., downtown-grill)', unique=True)),
                ('tax_rate', models.DecimalField(decimal_places=5, default=Decimal('0.08250'), help_text='Sales tax as a fraction (0.08250 = 8.25%)', max_digits=6, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('1'))])),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('timezone', models.CharField(default='UTC', max_length=64)),
                ('is_active', models.BooleanField(default=True, help_text='Inactive venues cannot access the system')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'venues',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['slug'], name='venues_slug_4f0a1c_idx'), models.Index(fields=['is_active'], name='venues_is_acti_9d2e3b_idx')],
            },
        ),
    ]
