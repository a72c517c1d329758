import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Token',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('fingerprint', models.CharField(help_text='URL-safe base64 SHA256 hash of the raw token', max_length=64, unique=True)),
                ('user_agent', models.CharField(blank=True, default='', help_text='Client user agent string at login', max_length=255)),
                ('created_at', models.DateTimeField(help_text='Token issue time')),
                ('last_used_at', models.DateTimeField(db_index=True, help_text='Last successful validation time')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tokens', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Token',
                'verbose_name_plural': 'Tokens',
                'ordering': ['-last_used_at'],
                'indexes': [models.Index(fields=['user', '-last_used_at'], name='tokens_user_last_used_idx')],
            },
        ),
    ]
