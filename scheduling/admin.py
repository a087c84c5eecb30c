"""
Admin configuration for the scheduling app.
"""

from django.contrib import admin
from .models import Booking, Category, GymSession, Member, Membership, Plan, Trainer


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name']
    search_fields = ['name']


@admin.register(Trainer)
class TrainerAdmin(admin.ModelAdmin):
    """Admin interface for Trainer model."""

    list_display = ['name', 'email', 'phone', 'rating', 'status']
    list_filter = ['status']
    search_fields = ['name', 'email', 'specialties']


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    """Admin interface for Member model."""

    list_display = ['name', 'email', 'phone', 'plan', 'status', 'join_date']
    list_filter = ['status', 'plan']
    search_fields = ['name', 'email', 'phone']
    date_hierarchy = 'join_date'


class BookingInline(admin.TabularInline):
    model = Booking
    extra = 0
    fields = ['member', 'is_attended', 'created_at']
    readonly_fields = ['created_at']


@admin.register(GymSession)
class GymSessionAdmin(admin.ModelAdmin):
    """Admin interface for GymSession model."""

    list_display = ['name', 'trainer', 'category', 'start_date', 'end_date', 'capacity', 'status']
    list_filter = ['status', 'category', 'trainer', 'created_at']
    search_fields = ['name']
    date_hierarchy = 'start_date'
    inlines = [BookingInline]

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'trainer', 'category', 'status')
        }),
        ('Schedule', {
            'fields': ('start_date', 'end_date', 'capacity')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    readonly_fields = ['created_at', 'updated_at']


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Admin interface for Booking model."""

    list_display = ['member', 'session', 'is_attended', 'created_at']
    list_filter = ['is_attended', 'session__category']
    search_fields = ['member__name', 'session__name']
    readonly_fields = ['created_at']


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    list_display = ['name', 'price', 'duration_months']
    search_fields = ['name']


@admin.register(Membership)
class MembershipAdmin(admin.ModelAdmin):
    """Admin interface for Membership model."""

    list_display = ['member', 'plan', 'start_date', 'end_date', 'payment_method']
    list_filter = ['plan', 'payment_method']
    search_fields = ['member__name', 'member__email', 'full_name']
    date_hierarchy = 'start_date'

    fieldsets = (
        ('Subscription', {
            'fields': ('member', 'plan', 'start_date', 'end_date', 'payment_method')
        }),
        ('Personal Details', {
            'fields': ('full_name', 'phone', 'gender', 'date_of_birth', 'height', 'weight', 'blood_type')
        }),
    )
