from django.contrib import admin
from .models import Booking, Review

class ReviewInline(admin.StackedInline):
    model = Review
    extra = 0

@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ('id', 'customer', 'worker', 'status', 'booking_date', 'booking_time', 'price', 'service_initiated')
    list_filter = ('status', 'booking_date')
    search_fields = ('customer__username', 'worker__user__username', 'customer_name', 'customer_phone')
    readonly_fields = ('service_otp', 'service_otp_expires', 'created_at', 'updated_at')
    inlines = [ReviewInline]
