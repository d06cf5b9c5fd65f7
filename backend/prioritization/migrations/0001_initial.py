import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ProductivityProfileRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('user_id', models.CharField(max_length=64, unique=True)),
                ('payload', models.JSONField(default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name='TaskRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('user_id', models.CharField(db_index=True, max_length=64)),
                ('title', models.CharField(help_text='Task title', max_length=255)),
                ('description', models.TextField(blank=True, null=True)),
                ('category', models.CharField(blank=True, default='', max_length=100)),
                ('notes', models.TextField(blank=True, null=True)),
                ('project_id', models.CharField(blank=True, max_length=64, null=True)),
                ('importance', models.FloatField(validators=[django.core.validators.MinValueValidator(0)])),
                ('urgency', models.FloatField(validators=[django.core.validators.MinValueValidator(0)])),
                ('impact', models.FloatField(validators=[django.core.validators.MinValueValidator(0)])),
                ('effort', models.FloatField(validators=[django.core.validators.MinValueValidator(0)])),
                ('estimated_time', models.FloatField(default=0, help_text='Estimated minutes to complete', validators=[django.core.validators.MinValueValidator(0)])),
                ('status', models.CharField(choices=[('incomplete', 'incomplete'), ('in-progress', 'in-progress'), ('complete', 'complete')], default='incomplete', max_length=16)),
                ('deadline', models.DateTimeField(blank=True, null=True)),
                ('year_assignment', models.IntegerField(blank=True, null=True)),
                ('month_assignment', models.IntegerField(blank=True, null=True)),
                ('week_assignment', models.IntegerField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('modified_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
    ]
