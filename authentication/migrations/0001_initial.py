from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='VoterAuthorization',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('identity', models.CharField(help_text='Normalized voter identity', max_length=255, unique=True, verbose_name='Identity')),
                ('authorized_at', models.DateTimeField(verbose_name='Authorized At')),
            ],
            options={
                'verbose_name': 'Voter Authorization',
                'verbose_name_plural': 'Voter Authorizations',
                'ordering': ['authorized_at', 'id'],
            },
        ),
    ]
