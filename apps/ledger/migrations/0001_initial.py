import uuid
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('players', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Weekend',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('start_date', models.DateField()),
                ('is_current', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='weekends', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'weekends',
                'ordering': ['start_date', 'created_at'],
                'indexes': [models.Index(fields=['owner', 'start_date'], name='weekends_owner_start_idx')],
                'constraints': [models.UniqueConstraint(condition=models.Q(('is_current', True)), fields=('owner',), name='one_current_weekend_per_owner')],
            },
        ),
        migrations.CreateModel(
            name='Match',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('type', models.CharField(choices=[('Saturday', 'Saturday'), ('Sunday', 'Sunday'), ('Weekday', 'Weekday')], max_length=10)),
                ('club', models.CharField(choices=[('MICC', 'MICC'), ('Sadhooz', 'Sadhooz')], max_length=10)),
                ('date', models.DateField()),
                ('ground_cost', models.FloatField(default=0.0, validators=[django.core.validators.MinValueValidator(0)])),
                ('cafeteria_cost', models.FloatField(default=0.0, validators=[django.core.validators.MinValueValidator(0)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('players', models.ManyToManyField(blank=True, related_name='matches', to='players.player')),
                ('weekend', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='matches', to='ledger.weekend')),
            ],
            options={
                'verbose_name_plural': 'matches',
                'db_table': 'matches',
                'ordering': ['date', 'created_at'],
                'constraints': [models.UniqueConstraint(condition=models.Q(('type__in', ['Saturday', 'Sunday'])), fields=('weekend', 'type'), name='one_weekend_match_per_day')],
            },
        ),
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount_due', models.FloatField(default=0.0)),
                ('amount_paid', models.FloatField(default=0.0)),
                ('status', models.CharField(choices=[('paid', 'Paid'), ('partial', 'Partial'), ('pending', 'Pending')], default='pending', max_length=10)),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('match', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='ledger.match')),
                ('player', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='players.player')),
            ],
            options={
                'db_table': 'payments',
                'ordering': ['date'],
                'indexes': [models.Index(fields=['player', 'status'], name='payments_player_status_idx')],
                'unique_together': {('match', 'player')},
            },
        ),
    ]
