import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('accounts', '0001_initial'),
        ('companies', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Manager',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('is_active', models.BooleanField(db_index=True, default=True, help_text='Inactive managers lose company access')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('company', models.ForeignKey(help_text='Company this manager works for', on_delete=django.db.models.deletion.CASCADE, related_name='managers', to='companies.company')),
                ('user', models.ForeignKey(help_text='User with the manager role', on_delete=django.db.models.deletion.CASCADE, related_name='manager_records', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['company', 'is_active'], name='manager_company_active_idx')],
                'constraints': [models.UniqueConstraint(fields=('user', 'company'), name='unique_manager_per_company')],
            },
        ),
    ]
