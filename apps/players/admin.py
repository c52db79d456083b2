# ==========================================
# apps/players/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Player


@admin.register(Player)
class PlayerAdmin(admin.ModelAdmin):
    """
    Admin interface for roster players.

    Shows the base balance as an owes/overpaid badge. The balance shown
    here is the stored base, not the computed ledger balance.
    """

    list_display = [
        'get_display_name',
        'owner',
        'mobile',
        'regular',
        'balance_badge',
        'created_at',
    ]

    list_filter = [
        'regular',
        'created_at',
    ]

    search_fields = [
        'first_name',
        'last_name',
        'nickname',
        'mobile',
        'owner__email',
    ]

    readonly_fields = [
        'created_at',
        'updated_at',
    ]

    ordering = ['owner', 'created_at']

    fieldsets = (
        ('Player', {
            'fields': (
                'owner',
                'first_name',
                'last_name',
                'nickname',
                'mobile',
                'regular',
            )
        }),
        ('Ledger', {
            'fields': (
                'balance',
                'arrears',
                'advance_payment',
            )
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def get_display_name(self, obj):
        return obj.get_display_name()
    get_display_name.short_description = 'Player'
    get_display_name.admin_order_field = 'first_name'

    def balance_badge(self, obj):
        """Owes (red), overpaid (green) or even (grey)."""
        if obj.balance > 0:
            bg, label = '#C62828', f'Owes ₹{obj.balance:g}'
        elif obj.balance < 0:
            bg, label = '#2E7D32', f'Overpaid ₹{abs(obj.balance):g}'
        else:
            bg, label = '#9E9E9E', 'Even'
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, label
        )
    balance_badge.short_description = 'Base balance'
    balance_badge.admin_order_field = 'balance'

    def get_queryset(self, request):
        """Optimize query with select_related."""
        qs = super().get_queryset(request)
        return qs.select_related('owner')
