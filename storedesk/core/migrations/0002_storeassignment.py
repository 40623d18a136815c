import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('core', '0001_initial'),
        ('locations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='StoreAssignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('assigned_at', models.DateTimeField(auto_now_add=True)),
                ('profile', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='core.profile')),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='locations.store')),
            ],
            options={
                'db_table': 'store_assignments',
                'ordering': ['assigned_at', 'id'],
                'unique_together': {('profile', 'store')},
            },
        ),
        migrations.AddField(
            model_name='profile',
            name='assigned_stores',
            field=models.ManyToManyField(blank=True, related_name='assigned_profiles', through='core.StoreAssignment', to='locations.store'),
        ),
    ]
