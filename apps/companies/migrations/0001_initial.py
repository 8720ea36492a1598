import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('references', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Company',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Public name of the rental company', max_length=255, unique=True)),
                ('address', models.CharField(blank=True, max_length=500)),
                ('phone', models.CharField(blank=True, max_length=30)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('logo_url', models.URLField(blank=True, max_length=500)),
                ('is_active', models.BooleanField(db_index=True, default=True, help_text='Whether this company can access the system')),
                ('settings', models.JSONField(blank=True, default=dict, help_text='Company configuration (seasons, duration_ranges)')),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, help_text='Timestamp when company was soft-deleted', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('currency', models.ForeignKey(blank=True, help_text='Base currency for prices', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to='references.currency')),
                ('location', models.ForeignKey(help_text='Location the company operates in', on_delete=django.db.models.deletion.PROTECT, related_name='companies', to='references.location')),
                ('owner', models.ForeignKey(blank=True, help_text='User with the owner role who runs this company', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='owned_companies', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Company',
                'verbose_name_plural': 'Companies',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['owner', 'is_active'], name='company_owner_active_idx'),
                    models.Index(fields=['deleted_at'], name='company_deleted_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CompanyCurrency',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('is_default', models.BooleanField(default=False)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='company_currencies', to='companies.company')),
                ('currency', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='company_links', to='references.currency')),
            ],
            options={
                'constraints': [
                    models.UniqueConstraint(fields=('company', 'currency'), name='unique_company_currency'),
                    models.UniqueConstraint(condition=models.Q(('is_default', True)), fields=('company',), name='single_default_currency_per_company'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DeliveryPrice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('price', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('is_active', models.BooleanField(default=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='delivery_prices', to='companies.company')),
                ('district', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='delivery_prices', to='references.district')),
            ],
            options={
                'constraints': [
                    models.UniqueConstraint(fields=('company', 'district'), name='unique_company_district_price'),
                    models.CheckConstraint(condition=models.Q(('price__gte', 0)), name='delivery_price_non_negative'),
                ],
            },
        ),
    ]
