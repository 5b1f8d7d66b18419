# Generated manually for payments app

import decimal
import uuid
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
            name='Payment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('order_id', models.CharField(max_length=20, unique=True, validators=[django.core.validators.RegexValidator('^ORDER-[A-Z0-9]{6,12}$')])),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.01')), django.core.validators.MaxValueValidator(decimal.Decimal('1000000'))])),
                ('currency', models.CharField(choices=[('USD', 'US Dollar'), ('EUR', 'Euro'), ('GBP', 'British Pound'), ('INR', 'Indian Rupee'), ('JPY', 'Japanese Yen'), ('CAD', 'Canadian Dollar'), ('AUD', 'Australian Dollar'), ('CNY', 'Chinese Yuan'), ('CHF', 'Swiss Franc'), ('SGD', 'Singapore Dollar'), ('NZD', 'New Zealand Dollar'), ('MXN', 'Mexican Peso'), ('BRL', 'Brazilian Real'), ('ZAR', 'South African Rand'), ('HKD', 'Hong Kong Dollar'), ('SEK', 'Swedish Krona'), ('NOK', 'Norwegian Krone'), ('DKK', 'Danish Krone'), ('AED', 'United Arab Emirates Dirham'), ('SAR', 'Saudi Riyal')], default='USD', max_length=3)),
                ('payment_method', models.CharField(choices=[('credit_card', 'Credit card'), ('debit_card', 'Debit card'), ('paypal', 'PayPal'), ('bank_transfer', 'Bank transfer'), ('crypto', 'Cryptocurrency'), ('cash_on_delivery', 'Cash on delivery')], max_length=20)),
                ('card_type', models.CharField(blank=True, choices=[('visa', 'Visa'), ('mastercard', 'Mastercard'), ('amex', 'American Express'), ('discover', 'Discover'), ('other', 'Other')], max_length=20, null=True)),
                ('last_four_digits', models.CharField(blank=True, max_length=4, null=True, validators=[django.core.validators.RegexValidator('^\\d{4}$')])),
                ('expiry_date', models.CharField(blank=True, max_length=5, null=True, validators=[django.core.validators.RegexValidator('^(0[1-9]|1[0-2])/\\d{2}$')])),
                ('billing_street', models.CharField(blank=True, max_length=200)),
                ('billing_city', models.CharField(blank=True, max_length=100)),
                ('billing_state', models.CharField(blank=True, max_length=100)),
                ('billing_postal_code', models.CharField(blank=True, max_length=20)),
                ('billing_country', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('processing', 'Processing'), ('completed', 'Completed'), ('failed', 'Failed'), ('refunded', 'Refunded'), ('cancelled', 'Cancelled')], default='pending', max_length=20)),
                ('transaction_id', models.CharField(blank=True, max_length=20, null=True, unique=True, validators=[django.core.validators.RegexValidator('^TXN-[A-Z0-9]{6,15}$')])),
                ('gateway_response', models.JSONField(blank=True, default=dict)),
                ('refund_id', models.CharField(blank=True, editable=False, max_length=20, null=True, unique=True)),
                ('refund_amount', models.DecimalField(blank=True, decimal_places=2, editable=False, max_digits=10, null=True)),
                ('refund_date', models.DateTimeField(blank=True, editable=False, null=True)),
                ('refund_reason', models.CharField(blank=True, editable=False, max_length=500)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'payments',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'created_at'], name='payments_user_created_idx'),
                    models.Index(fields=['status', 'created_at'], name='payments_status_created_idx'),
                    models.Index(fields=['payment_method'], name='payments_method_idx'),
                ],
            },
        ),
    ]
