import django.core.validators
import django.db.models.deletion
import simple_history.models
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('companies', '0001_initial'),
        ('references', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='CompanyCar',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, help_text='Timestamp when record was soft-deleted', null=True)),
                ('year', models.PositiveSmallIntegerField(help_text='Year of manufacture', validators=[django.core.validators.MinValueValidator(2015)])),
                ('mileage', models.PositiveIntegerField(default=0, help_text='Odometer in km')),
                ('vin', models.CharField(blank=True, db_index=True, max_length=17)),
                ('license_plate', models.CharField(db_index=True, help_text='License plate number', max_length=20)),
                ('price_per_day', models.DecimalField(decimal_places=2, help_text='Base daily price', max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('price_per_month', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('seasonal_prices', models.JSONField(blank=True, default=dict, help_text='Daily price per season id and duration range id')),
                ('island_trip_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('krabi_trip_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('full_insurance_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('baby_seat_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('status', models.CharField(choices=[('available', 'Available'), ('maintenance', 'Maintenance'), ('rented', 'Rented'), ('booked', 'Booked')], db_index=True, default='available', max_length=20)),
                ('next_oil_change_mileage', models.PositiveIntegerField(blank=True, null=True)),
                ('insurance_expiry', models.DateField(blank=True, null=True)),
                ('registration_expiry', models.DateField(blank=True, null=True)),
                ('insurance_type', models.CharField(blank=True, max_length=50)),
                ('photos', models.JSONField(blank=True, default=list, help_text='Storage keys of car photos')),
                ('document_photos', models.JSONField(blank=True, default=list)),
                ('featured_image_index', models.PositiveSmallIntegerField(default=0)),
                ('marketing_headline', models.CharField(blank=True, max_length=255)),
                ('description', models.TextField(blank=True)),
                ('color', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='company_cars', to='references.carcolor')),
                ('company', models.ForeignKey(help_text='Rental company this record belongs to', on_delete=django.db.models.deletion.PROTECT, related_name='%(class)s_set', to='companies.company')),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(class)s_created_set', to=settings.AUTH_USER_MODEL)),
                ('template', models.ForeignKey(help_text='Catalog template (brand, model, spec)', on_delete=django.db.models.deletion.PROTECT, related_name='company_cars', to='references.cartemplate')),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(class)s_updated_set', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Company car',
                'verbose_name_plural': 'Company cars',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['company', 'status'], name='car_company_status_idx'),
                    models.Index(fields=['company', 'license_plate'], name='car_company_plate_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('deleted_at__isnull', True)), fields=('company', 'license_plate'), name='unique_plate_per_company', violation_error_message='A car with this license plate already exists.'),
                    models.UniqueConstraint(condition=models.Q(('deleted_at__isnull', True), models.Q(('vin', ''), _negated=True)), fields=('company', 'vin'), name='unique_vin_per_company', violation_error_message='A car with this VIN already exists.'),
                    models.CheckConstraint(condition=models.Q(('price_per_day__gte', 0)), name='car_price_per_day_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Booking',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('start_date', models.DateTimeField()),
                ('end_date', models.DateTimeField()),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('cancelled', 'Cancelled')], db_index=True, default='pending', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('car', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bookings', to='core.companycar')),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bookings', to=settings.AUTH_USER_MODEL)),
                ('company', models.ForeignKey(help_text='Rental company this record belongs to', on_delete=django.db.models.deletion.PROTECT, related_name='%(class)s_set', to='companies.company')),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(class)s_created_set', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(class)s_updated_set', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['company', 'status'], name='booking_company_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='Contract',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, help_text='Timestamp when record was soft-deleted', null=True)),
                ('start_date', models.DateTimeField(db_index=True)),
                ('end_date', models.DateTimeField(db_index=True)),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('deposit_amount', models.DecimalField(decimal_places=2, default=0, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('notes', models.TextField(blank=True, help_text='Free-text notes followed by encoded pickup details', null=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], db_index=True, default='active', max_length=20)),
                ('photos', models.JSONField(blank=True, default=list)),
                ('booking', models.ForeignKey(blank=True, help_text='Booking this contract was created from', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='contracts', to='core.booking')),
                ('car', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='contracts', to='core.companycar')),
                ('client', models.ForeignKey(help_text='Client renting the car', on_delete=django.db.models.deletion.PROTECT, related_name='contracts', to=settings.AUTH_USER_MODEL)),
                ('company', models.ForeignKey(help_text='Rental company this record belongs to', on_delete=django.db.models.deletion.PROTECT, related_name='%(class)s_set', to='companies.company')),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(class)s_created_set', to=settings.AUTH_USER_MODEL)),
                ('manager', models.ForeignKey(blank=True, help_text='Staff member responsible for the contract', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='managed_contracts', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(class)s_updated_set', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Contract',
                'verbose_name_plural': 'Contracts',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['company', 'status'], name='contract_company_status_idx'),
                    models.Index(fields=['company', 'start_date'], name='contract_company_start_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('total_amount__gte', 0)), name='contract_total_non_negative'),
                    models.CheckConstraint(condition=models.Q(('deposit_amount__gte', 0)), name='contract_deposit_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('amount', models.DecimalField(decimal_places=2, help_text='Payment amount', max_digits=12)),
                ('payment_method', models.CharField(choices=[('pending', 'Pending'), ('cash', 'Cash'), ('card', 'Card'), ('bank_transfer', 'Bank Transfer'), ('qr', 'QR Payment')], help_text='Method of payment', max_length=30)),
                ('notes', models.TextField(blank=True)),
                ('company', models.ForeignKey(help_text='Rental company this record belongs to', on_delete=django.db.models.deletion.PROTECT, related_name='%(class)s_set', to='companies.company')),
                ('contract', models.ForeignKey(help_text='Contract this payment belongs to', on_delete=django.db.models.deletion.PROTECT, related_name='payments', to='core.contract')),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(class)s_created_set', to=settings.AUTH_USER_MODEL)),
                ('payment_status', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payments', to='references.paymentstatus')),
                ('payment_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='payments', to='references.paymenttype')),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(class)s_updated_set', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Payment',
                'verbose_name_plural': 'Payments',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['company', 'created_at'], name='payment_company_created_idx'),
                    models.Index(fields=['contract', 'created_at'], name='payment_contract_created_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='HistoricalCompanyCar',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('created_at', models.DateTimeField(blank=True, db_index=True, editable=False)),
                ('updated_at', models.DateTimeField(blank=True, editable=False)),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, help_text='Timestamp when record was soft-deleted', null=True)),
                ('year', models.PositiveSmallIntegerField(help_text='Year of manufacture', validators=[django.core.validators.MinValueValidator(2015)])),
                ('mileage', models.PositiveIntegerField(default=0, help_text='Odometer in km')),
                ('vin', models.CharField(blank=True, db_index=True, max_length=17)),
                ('license_plate', models.CharField(db_index=True, help_text='License plate number', max_length=20)),
                ('price_per_day', models.DecimalField(decimal_places=2, help_text='Base daily price', max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('price_per_month', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('seasonal_prices', models.JSONField(blank=True, default=dict, help_text='Daily price per season id and duration range id')),
                ('island_trip_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('krabi_trip_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('full_insurance_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('baby_seat_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('status', models.CharField(choices=[('available', 'Available'), ('maintenance', 'Maintenance'), ('rented', 'Rented'), ('booked', 'Booked')], db_index=True, default='available', max_length=20)),
                ('next_oil_change_mileage', models.PositiveIntegerField(blank=True, null=True)),
                ('insurance_expiry', models.DateField(blank=True, null=True)),
                ('registration_expiry', models.DateField(blank=True, null=True)),
                ('insurance_type', models.CharField(blank=True, max_length=50)),
                ('photos', models.JSONField(blank=True, default=list, help_text='Storage keys of car photos')),
                ('document_photos', models.JSONField(blank=True, default=list)),
                ('featured_image_index', models.PositiveSmallIntegerField(default=0)),
                ('marketing_headline', models.CharField(blank=True, max_length=255)),
                ('description', models.TextField(blank=True)),
                ('history_id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('color', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='references.carcolor')),
                ('company', models.ForeignKey(blank=True, db_constraint=False, help_text='Rental company this record belongs to', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='companies.company')),
                ('created_by', models.ForeignKey(blank=True, db_constraint=False, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('template', models.ForeignKey(blank=True, db_constraint=False, help_text='Catalog template (brand, model, spec)', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='references.cartemplate')),
                ('updated_by', models.ForeignKey(blank=True, db_constraint=False, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'historical Company car',
                'verbose_name_plural': 'historical Company cars',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='HistoricalContract',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('created_at', models.DateTimeField(blank=True, db_index=True, editable=False)),
                ('updated_at', models.DateTimeField(blank=True, editable=False)),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, help_text='Timestamp when record was soft-deleted', null=True)),
                ('start_date', models.DateTimeField(db_index=True)),
                ('end_date', models.DateTimeField(db_index=True)),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('deposit_amount', models.DecimalField(decimal_places=2, default=0, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('notes', models.TextField(blank=True, help_text='Free-text notes followed by encoded pickup details', null=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], db_index=True, default='active', max_length=20)),
                ('photos', models.JSONField(blank=True, default=list)),
                ('history_id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('booking', models.ForeignKey(blank=True, db_constraint=False, help_text='Booking this contract was created from', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='core.booking')),
                ('car', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='core.companycar')),
                ('client', models.ForeignKey(blank=True, db_constraint=False, help_text='Client renting the car', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('company', models.ForeignKey(blank=True, db_constraint=False, help_text='Rental company this record belongs to', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='companies.company')),
                ('created_by', models.ForeignKey(blank=True, db_constraint=False, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('manager', models.ForeignKey(blank=True, db_constraint=False, help_text='Staff member responsible for the contract', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, db_constraint=False, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'historical Contract',
                'verbose_name_plural': 'historical Contracts',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
