"""
Management command to create a demo ledger.

Usage:
    python manage.py seed_ledger [--email demo@example.com] [--clear]

This creates:
- A demo organiser account (password: demo12345)
- Five sample players
- The current weekend
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User
from apps.ledger.services import get_current_weekend, reset_ledger
from apps.players.models import Player
from apps.players.services import create_player


SAMPLE_PLAYERS = [
    {'first_name': 'Sai', 'last_name': 'Ragha', 'mobile': '9999999999'},
    {'first_name': 'Rahul', 'last_name': 'Sharma', 'mobile': '8888888888'},
    {'first_name': 'Amit', 'last_name': 'Patel', 'mobile': '7777777777'},
    {'first_name': 'Vikas', 'last_name': '', 'mobile': '6666666666'},
    {'first_name': 'Rohit', 'last_name': 'Singh', 'mobile': '5555555555'},
]


class Command(BaseCommand):
    help = 'Create a demo organiser with sample players'

    def add_arguments(self, parser):
        parser.add_argument(
            '--email',
            default='demo@example.com',
            help='Email of the demo organiser',
        )
        parser.add_argument(
            '--clear',
            action='store_true',
            help="Wipe the organiser's ledger before seeding",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        email = options['email']
        owner = User.objects.filter(email__iexact=email).first()
        if owner is None:
            owner = User.objects.create_user(
                email=email,
                password='demo12345',
                display_name='Demo Organiser',
            )
            self.stdout.write(f'Created organiser {email} / demo12345')

        if options['clear']:
            self.stdout.write('Clearing existing ledger...')
            reset_ledger(owner=owner)

        existing = set(
            Player.objects.filter(owner=owner).values_list('mobile', flat=True)
        )
        created = 0
        for sample in SAMPLE_PLAYERS:
            if sample['mobile'] in existing:
                continue
            create_player(owner=owner, **sample)
            created += 1

        weekend = get_current_weekend(owner=owner)

        self.stdout.write(self.style.SUCCESS(
            f'Seeded {created} player(s); current weekend starts {weekend.start_date}.'
        ))