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
        ('qrcodes', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PartnerShop',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('address_line', models.CharField(blank=True, max_length=255)),
                ('postcode', models.CharField(blank=True, max_length=12)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('staff', models.ManyToManyField(blank=True, related_name='partner_shops', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'partner_shops',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ScanEvent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('mode', models.CharField(choices=[('dropoff', 'Drop-off'), ('pickup', 'Pickup')], max_length=10)),
                ('result', models.CharField(choices=[('accepted', 'Accepted'), ('rejected', 'Rejected'), ('released', 'Released')], max_length=10)),
                ('reason', models.CharField(blank=True, max_length=255)),
                ('staff_name', models.CharField(blank=True, max_length=100)),
                ('notes', models.TextField(blank=True)),
                ('co2_impact', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=8)),
                ('scanned_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('claim_request', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='scan_events', to='exchanges.claimrequest')),
                ('listing', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='scan_events', to='listings.listing')),
                ('qr_code', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='scan_events', to='qrcodes.qrcode')),
                ('scanned_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='scan_events', to=settings.AUTH_USER_MODEL)),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='scan_events', to='partners.partnershop')),
            ],
            options={
                'db_table': 'scan_events',
                'ordering': ['-scanned_at'],
                'indexes': [
                    models.Index(fields=['shop', '-scanned_at'], name='scan_events_shop_idx'),
                    models.Index(fields=['listing', '-scanned_at'], name='scan_events_listing_idx'),
                ],
            },
        ),
    ]
