from django.contrib import admin
from .models import Payment

@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('booking', 'amount', 'status', 'payment_type', 'order_id', 'transaction_id', 'transaction_date')
    list_filter = ('status', 'payment_type')
    search_fields = ('order_id', 'transaction_id', 'booking__customer__username')
    readonly_fields = ('cash_otp', 'cash_otp_expires', 'created_at', 'updated_at')
