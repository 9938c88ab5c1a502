"""
Admin configuration for voting app.

Everything here is read-only: the ledger is only changed through
VotingLedger so its invariants (dense ids, tally sums, single votes)
cannot be broken from the admin.
"""
from django.contrib import admin
from django.utils.html import format_html
from django.utils import timezone
from .models import VotingSession, Candidate, VoteRecord, LedgerEvent, LedgerState


class ReadOnlyAdmin(admin.ModelAdmin):
    """
    Base admin refusing every write.
    """

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class CandidateInline(admin.TabularInline):
    model = Candidate
    extra = 0
    fields = ('index', 'name', 'vote_count')
    readonly_fields = fields
    ordering = ('index',)
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(LedgerState)
class LedgerStateAdmin(ReadOnlyAdmin):
    list_display = ('authority', 'session_count', 'event_count', 'initialized_at')


@admin.register(VotingSession)
class VotingSessionAdmin(ReadOnlyAdmin):
    """
    Admin interface for VotingSession model
    """
    list_display = (
        'index',
        'title',
        'start_time',
        'end_time',
        'is_active',
        'voting_status',
        'candidate_count',
        'total_votes'
    )
    list_filter = ('is_active', 'start_time')
    search_fields = ('title',)
    ordering = ('index',)
    inlines = [CandidateInline]

    def voting_status(self, obj):
        """Show if voting is currently open"""
        if obj.is_open(timezone.now()):
            return format_html('<span style="color: green;">● Open</span>')
        elif obj.is_active:
            return format_html('<span style="color: orange;">● Period ended</span>')
        else:
            return format_html('<span style="color: red;">● Ended</span>')
    voting_status.short_description = "Status"


@admin.register(Candidate)
class CandidateAdmin(ReadOnlyAdmin):
    list_display = ('name', 'voting_session', 'index', 'vote_count_display')
    list_filter = ('voting_session',)
    search_fields = ('name', 'voting_session__title')
    ordering = ('voting_session__index', 'index')

    def vote_count_display(self, obj):
        return format_html('<strong>{}</strong>', obj.vote_count)
    vote_count_display.short_description = "Votes"


@admin.register(VoteRecord)
class VoteRecordAdmin(ReadOnlyAdmin):
    """
    Shows WHO voted WHERE
    """
    list_display = ('voter', 'voting_session', 'cast_at')
    list_filter = ('voting_session', 'cast_at')
    search_fields = ('voter', 'voting_session__title')
    ordering = ('-cast_at',)


@admin.register(LedgerEvent)
class LedgerEventAdmin(ReadOnlyAdmin):
    list_display = ('sequence', 'kind', 'session_index', 'candidate_index', 'identity', 'emitted_at')
    list_filter = ('kind',)
    search_fields = ('identity',)
    ordering = ('sequence',)
