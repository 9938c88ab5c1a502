"""
Initialize the ledger and fix its authority.

Usage:
    python manage.py init_ledger --authority 0xabc...
    LEDGER_AUTHORITY=0xabc... python manage.py init_ledger
"""
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from authentication.tokens import issue_identity_token
from voting.exceptions import LedgerError
from voting.services import VotingLedger


class Command(BaseCommand):
    help = "Initialize the voting ledger with its (permanent) authority identity"

    def add_arguments(self, parser):
        parser.add_argument(
            '--authority',
            default=settings.LEDGER_AUTHORITY,
            help="Authority identity (defaults to the LEDGER_AUTHORITY setting)",
        )
        parser.add_argument(
            '--print-token',
            action='store_true',
            help="Also print an HS256 identity token for the authority",
        )

    def handle(self, *args, **options):
        try:
            state = VotingLedger.initialize(options['authority'])
        except LedgerError as e:
            raise CommandError(f"{e.code}: {e.detail}")

        self.stdout.write(self.style.SUCCESS(f"Ledger initialized with authority {state.authority}"))

        if options['print_token']:
            self.stdout.write(issue_identity_token(state.authority))
