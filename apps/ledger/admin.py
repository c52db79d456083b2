# ==========================================
# apps/ledger/admin.py
# ==========================================

from django.contrib import admin
from django.db.models import Count
from django.utils.html import format_html
from .calculations import derive_status
from .models import Weekend, Match, Payment, PaymentStatus


STATUS_COLORS = {
    PaymentStatus.PAID: ('#2E7D32', 'white'),
    PaymentStatus.PARTIAL: ('#F9A825', '#1B1B1B'),
    PaymentStatus.PENDING: ('#C62828', 'white'),
}


def _status_badge(obj):
    bg, fg = STATUS_COLORS.get(obj.status, ('#ccc', '#666'))
    return format_html(
        '<span style="background: {}; color: {}; padding: 3px 8px; '
        'border-radius: 10px; font-size: 11px;">{}</span>',
        bg, fg, obj.get_status_display()
    )


class PaymentInline(admin.TabularInline):
    """Inline admin for payments within a match."""
    model = Payment
    extra = 0
    fields = [
        'player',
        'amount_due',
        'amount_paid',
        'status_badge',
        'date',
    ]
    readonly_fields = ['player', 'amount_due', 'status_badge', 'date']

    def status_badge(self, obj):
        return _status_badge(obj)
    status_badge.short_description = 'Status'

    def has_add_permission(self, request, obj=None):
        """Payments are created when the match is saved through the API."""
        return False


class MatchInline(admin.TabularInline):
    model = Match
    extra = 0
    fields = ['type', 'club', 'date', 'ground_cost', 'cafeteria_cost']
    show_change_link = True


@admin.register(Weekend)
class WeekendAdmin(admin.ModelAdmin):
    """Admin interface for ledger weekends."""

    list_display = [
        'start_date',
        'owner',
        'is_current',
        'get_match_count',
        'created_at',
    ]

    list_filter = ['is_current', 'start_date']
    search_fields = ['owner__email', 'owner__display_name']
    ordering = ['-start_date']
    date_hierarchy = 'start_date'
    inlines = [MatchInline]

    def get_match_count(self, obj):
        return obj.match_count
    get_match_count.short_description = 'Matches'
    get_match_count.admin_order_field = 'match_count'

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('owner').annotate(match_count=Count('matches'))


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    """
    Admin interface for matches.

    Cost or participant changes made here do not rebuild payments; use the
    API for that.
    """

    list_display = [
        'date',
        'type',
        'club',
        'ground_cost',
        'cafeteria_cost',
        'get_player_count',
        'get_owner',
    ]

    list_filter = ['type', 'club', 'date']
    search_fields = ['weekend__owner__email']
    ordering = ['-date']
    filter_horizontal = ['players']
    inlines = [PaymentInline]

    def get_player_count(self, obj):
        return obj.player_count
    get_player_count.short_description = 'Players'
    get_player_count.admin_order_field = 'player_count'

    def get_owner(self, obj):
        return obj.weekend.owner
    get_owner.short_description = 'Organiser'

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('weekend__owner').annotate(
            player_count=Count('players', distinct=True)
        )

    def save_formset(self, request, form, formset, change):
        if formset.model is not Payment:
            return super().save_formset(request, form, formset, change)

        for payment in formset.save(commit=False):
            payment.status = derive_status(payment.amount_paid, payment.amount_due)
            payment.save()
        for payment in formset.deleted_objects:
            payment.delete()
        formset.save_m2m()


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Admin interface for individual payments."""

    list_display = [
        'player',
        'get_match',
        'amount_due',
        'amount_paid',
        'status_badge',
        'date',
    ]

    list_filter = ['status', 'match__type', 'date']
    search_fields = [
        'player__first_name',
        'player__last_name',
        'player__nickname',
        'player__mobile',
    ]
    ordering = ['-date']
    readonly_fields = ['match', 'player', 'amount_due', 'status', 'date', 'updated_at']

    def get_match(self, obj):
        return str(obj.match)
    get_match.short_description = 'Match'

    def status_badge(self, obj):
        return _status_badge(obj)
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    def save_model(self, request, obj, form, change):
        obj.status = derive_status(obj.amount_paid, obj.amount_due)
        super().save_model(request, obj, form, change)

    @admin.action(description='Mark selected payments as paid')
    def mark_paid(self, request, queryset):
        count = 0
        for payment in queryset:
            payment.amount_paid = payment.amount_due
            payment.status = PaymentStatus.PAID
            payment.save(update_fields=['amount_paid', 'status', 'updated_at'])
            count += 1
        self.message_user(request, f'Marked {count} payment(s) as paid.')

    actions = ['mark_paid']

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('player', 'match')
