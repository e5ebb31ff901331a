# subscriptions/admin.py

from django.contrib import admin

from subscriptions.models import PromoCode, PromoCodeAssignment


class PromoCodeAssignmentInline(admin.TabularInline):
    model = PromoCodeAssignment
    extra = 0
    autocomplete_fields = ("profile",)


@admin.register(PromoCode)
class PromoCodeAdmin(admin.ModelAdmin):
    list_display = ("code", "days_to_add", "is_used", "used_by", "used_at", "created_at")
    list_filter = ("is_used",)
    search_fields = ("code",)
    readonly_fields = ("used_by", "used_at", "created_at")
    inlines = [PromoCodeAssignmentInline]
