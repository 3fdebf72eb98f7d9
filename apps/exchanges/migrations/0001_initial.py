import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('listings', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ClaimRequest',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('item_title', models.CharField(max_length=200)),
                ('donor_name', models.CharField(blank=True, max_length=100)),
                ('collector_name', models.CharField(blank=True, max_length=100)),
                ('note', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('declined', 'Declined'), ('completed', 'Completed')], default='pending', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('decision_at', models.DateTimeField(blank=True, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('collector', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='claim_requests', to=settings.AUTH_USER_MODEL)),
                ('donor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='received_claim_requests', to=settings.AUTH_USER_MODEL)),
                ('listing', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='claim_requests', to='listings.listing')),
            ],
            options={
                'db_table': 'claim_requests',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['listing', 'status'], name='claims_listing_status_idx'),
                    models.Index(fields=['donor', 'status'], name='claims_donor_status_idx'),
                    models.Index(fields=['collector', 'status'], name='claims_collector_status_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status', 'completed'), _negated=True), fields=('listing', 'collector'), name='unique_open_claim_per_collector'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CollectedItemRecord',
            fields=[
                ('listing', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='collection_record', serialize=False, to='listings.listing')),
                ('collected', models.BooleanField(default=False)),
                ('confirmed_at', models.DateTimeField(blank=True, null=True)),
                ('claim_request', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='exchanges.claimrequest')),
            ],
            options={
                'db_table': 'collected_items',
            },
        ),
    ]
