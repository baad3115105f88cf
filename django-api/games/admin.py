from django.contrib import admin

from games.models import CardBreak, Game, PrizePool, SpecialPrize, TicketGroup, TicketLevel


class TicketLevelInline(admin.TabularInline):
    model = TicketLevel
    extra = 0
    fields = ["level", "level_name", "quantity", "price_per_seat", "tier_level", "tier_priority"]


class TicketGroupInline(admin.TabularInline):
    model = TicketGroup
    extra = 0
    fields = ["section", "row", "quantity", "price_per_seat", "status", "tier_level", "tier_priority"]


@admin.register(Game)
class GameAdmin(admin.ModelAdmin):
    list_display = ["event_name", "event_date", "status", "spin_price_per_bundle", "pools_stale"]
    list_filter = ["status", "sport"]
    search_fields = ["event_name", "venue", "city"]
    readonly_fields = [
        "avg_ticket_price",
        "avg_break_value",
        "spin_price_per_bundle",
        "spin_price_1x",
        "spin_price_2x",
        "spin_price_3x",
        "spin_price_4x",
        "pricing_updated_at",
    ]
    inlines = [TicketLevelInline, TicketGroupInline]


@admin.register(TicketGroup)
class TicketGroupAdmin(admin.ModelAdmin):
    list_display = ["section", "row", "game", "quantity", "price_per_seat", "status", "tier_level"]
    list_filter = ["status", "tier_level", "game"]


@admin.register(TicketLevel)
class TicketLevelAdmin(admin.ModelAdmin):
    list_display = ["level_name", "game", "quantity", "price_per_seat", "tier_level", "tier_priority"]
    list_filter = ["tier_level", "game"]


@admin.register(SpecialPrize)
class SpecialPrizeAdmin(admin.ModelAdmin):
    list_display = ["name", "game", "value", "quantity", "is_backup", "backup_for"]
    list_filter = ["is_backup", "game"]
    search_fields = ["name"]


@admin.register(CardBreak)
class CardBreakAdmin(admin.ModelAdmin):
    list_display = ["break_name", "game", "break_value", "quantity", "status"]
    list_filter = ["status", "game"]
    search_fields = ["break_name", "source_url"]


@admin.register(PrizePool)
class PrizePoolAdmin(admin.ModelAdmin):
    list_display = ["game", "bundle_size", "pack", "status", "total_price", "created_at"]
    list_filter = ["status", "bundle_size", "game"]
    readonly_fields = ["bundles", "claimed_by", "claimed_at"]
