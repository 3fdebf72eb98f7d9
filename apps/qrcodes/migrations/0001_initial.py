import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('listings', '0001_initial'),
        ('exchanges', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='QRCode',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('transaction_id', models.CharField(db_index=True, max_length=40)),
                ('code_type', models.CharField(choices=[('donor', 'Donor'), ('collector', 'Collector')], max_length=10)),
                ('holder_name', models.CharField(blank=True, max_length=100)),
                ('category', models.CharField(blank=True, max_length=100)),
                ('condition', models.CharField(blank=True, max_length=50)),
                ('co2_impact', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=8)),
                ('action_type', models.CharField(choices=[('donate', 'Donate'), ('exchange', 'Exchange'), ('recycle', 'Recycle')], default='donate', max_length=20)),
                ('drop_off_location', models.CharField(blank=True, max_length=255)),
                ('status', models.CharField(choices=[('active', 'Active'), ('scanned', 'Scanned'), ('expired', 'Expired'), ('completed', 'Completed')], default='active', max_length=20)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('expires_at', models.DateTimeField()),
                ('scanned_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('superseded_at', models.DateTimeField(blank=True, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('claim_request', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='qr_codes', to='exchanges.claimrequest')),
                ('holder', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='qr_codes', to=settings.AUTH_USER_MODEL)),
                ('listing', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='qr_codes', to='listings.listing')),
            ],
            options={
                'db_table': 'qr_codes',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['transaction_id', 'code_type'], name='qr_codes_txn_type_idx'),
                    models.Index(fields=['holder', 'status'], name='qr_codes_holder_status_idx'),
                    models.Index(fields=['listing', 'status'], name='qr_codes_listing_status_idx'),
                ],
            },
        ),
    ]
