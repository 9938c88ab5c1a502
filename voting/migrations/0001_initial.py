import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='LedgerState',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('authority', models.CharField(help_text='The only identity allowed to administer the ledger', max_length=255, verbose_name='Authority')),
                ('session_count', models.PositiveIntegerField(default=0, verbose_name='Sessions')),
                ('event_count', models.PositiveIntegerField(default=0, verbose_name='Events')),
                ('initialized_at', models.DateTimeField(verbose_name='Initialized At')),
            ],
            options={
                'verbose_name': 'Ledger State',
                'verbose_name_plural': 'Ledger State',
            },
        ),
        migrations.CreateModel(
            name='VotingSession',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('index', models.PositiveIntegerField(help_text='Dense, zero-based, never reused', unique=True, verbose_name='Session Id')),
                ('title', models.CharField(blank=True, max_length=255, verbose_name='Title')),
                ('start_time', models.DateTimeField(verbose_name='Start Time')),
                ('end_time', models.DateTimeField(verbose_name='End Time')),
                ('is_active', models.BooleanField(default=True, help_text='Set to False only by ending the session', verbose_name='Active')),
                ('candidate_count', models.PositiveIntegerField(default=0, verbose_name='Candidates')),
                ('total_votes', models.PositiveIntegerField(default=0, verbose_name='Total Votes')),
            ],
            options={
                'verbose_name': 'Voting Session',
                'verbose_name_plural': 'Voting Sessions',
                'ordering': ['index'],
            },
        ),
        migrations.CreateModel(
            name='LedgerEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sequence', models.PositiveIntegerField(unique=True, verbose_name='Sequence')),
                ('kind', models.CharField(choices=[('session_created', 'Session Created'), ('candidate_added', 'Candidate Added'), ('vote_cast', 'Vote Cast'), ('voter_authorized', 'Voter Authorized'), ('session_ended', 'Session Ended')], max_length=32, verbose_name='Kind')),
                ('session_index', models.PositiveIntegerField(blank=True, null=True, verbose_name='Session Id')),
                ('candidate_index', models.PositiveIntegerField(blank=True, null=True, verbose_name='Candidate Id')),
                ('identity', models.CharField(blank=True, max_length=255, verbose_name='Identity')),
                ('payload', models.JSONField(blank=True, default=dict, verbose_name='Payload')),
                ('emitted_at', models.DateTimeField(verbose_name='Emitted At')),
            ],
            options={
                'verbose_name': 'Ledger Event',
                'verbose_name_plural': 'Ledger Events',
                'ordering': ['sequence'],
                'indexes': [
                    models.Index(fields=['kind'], name='ledger_event_kind_idx'),
                    models.Index(fields=['session_index'], name='ledger_event_session_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Candidate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('index', models.PositiveIntegerField(verbose_name='Candidate Id')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('vote_count', models.PositiveIntegerField(default=0, verbose_name='Votes')),
                ('voting_session', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='candidates', to='voting.votingsession', verbose_name='Voting Session')),
            ],
            options={
                'verbose_name': 'Candidate',
                'verbose_name_plural': 'Candidates',
                'ordering': ['voting_session', 'index'],
                'constraints': [
                    models.UniqueConstraint(fields=('voting_session', 'index'), name='unique_candidate_index_per_session'),
                ],
            },
        ),
        migrations.CreateModel(
            name='VoteRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('voter', models.CharField(max_length=255, verbose_name='Voter')),
                ('cast_at', models.DateTimeField(verbose_name='Cast At')),
                ('voting_session', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='vote_records', to='voting.votingsession', verbose_name='Voting Session')),
            ],
            options={
                'verbose_name': 'Vote Record',
                'verbose_name_plural': 'Vote Records',
                'ordering': ['voting_session', 'cast_at', 'id'],
                'indexes': [
                    models.Index(fields=['voter'], name='vote_record_voter_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('voting_session', 'voter'), name='unique_vote_per_voter_per_session'),
                ],
            },
        ),
    ]
