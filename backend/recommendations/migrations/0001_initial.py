# Generated migration for recommendations app

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('spots', '0001_initial'),
        ('user', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Interaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('interaction_type', models.CharField(help_text='view, like, save, share or visit; other values are stored with weight 1', max_length=20)),
                ('weight', models.IntegerField(default=1)),
                ('timestamp', models.DateTimeField(auto_now_add=True)),
                ('spot', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='interactions', to='spots.spot')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='interactions', to='user.userprofile')),
            ],
            options={
                'db_table': 'recommendations_interaction',
                'indexes': [
                    models.Index(fields=['user', 'timestamp'], name='interaction_user_ts_idx'),
                    models.Index(fields=['spot', 'timestamp'], name='interaction_spot_ts_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='UserPreferences',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('preferred_regions', models.JSONField(blank=True, default=list, help_text='Region names ordered by summed interaction weight')),
                ('preferred_categories', models.JSONField(blank=True, default=list)),
                ('interest_tags', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='preferences', to='user.userprofile')),
            ],
            options={
                'db_table': 'recommendations_user_preferences',
                'verbose_name_plural': 'user preferences',
            },
        ),
    ]
