# Generated migration for initial spots app setup

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('user', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Spot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('list_name', models.CharField(help_text='Name of the list this spot belongs to', max_length=100)),
                ('region', models.CharField(help_text='Prefecture the list is tagged with', max_length=50)),
                ('place_name', models.CharField(max_length=255)),
                ('url', models.URLField(blank=True, default='', max_length=1000)),
                ('comment', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('owner', models.ForeignKey(help_text='User who saved the spot', on_delete=django.db.models.deletion.CASCADE, related_name='spots', to='user.userprofile')),
            ],
            options={
                'db_table': 'spots_spot',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['owner'], name='spots_owner_idx'),
                    models.Index(fields=['region'], name='spots_region_idx'),
                ],
            },
        ),
    ]
