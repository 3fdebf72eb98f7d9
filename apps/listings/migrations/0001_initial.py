import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Listing',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(default='Other', max_length=100)),
                ('condition', models.CharField(blank=True, max_length=50)),
                ('image_url', models.URLField(blank=True)),
                ('co2_impact', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=8, validators=[MinValueValidator(Decimal('0.00'))])),
                ('pickup_option', models.CharField(choices=[('donate', 'Donate'), ('exchange', 'Exchange'), ('recycle', 'Recycle')], default='donate', max_length=20)),
                ('status', models.CharField(choices=[('active', 'Active'), ('pending_dropoff', 'Pending drop-off'), ('claimed', 'Claimed'), ('awaiting_collection', 'Awaiting collection'), ('collected', 'Collected')], default='active', max_length=30)),
                ('drop_off_location', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('donor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='listings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'listings',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['donor', 'status'], name='listings_donor_status_idx'),
                    models.Index(fields=['status'], name='listings_status_idx'),
                ],
            },
        ),
    ]
