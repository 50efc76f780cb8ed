from django.urls import path
from .views import (
    RazorpayCreateOrderView, RazorpayVerifyView, CashPaymentInitiateView,
    CashPaymentVerifyView, PaymentStatusView, RazorpayWebhookView,
)

urlpatterns = [
    path('razorpay/create-order/', RazorpayCreateOrderView.as_view(), name='payment_razorpay_create_order'),
    path('razorpay/verify/', RazorpayVerifyView.as_view(), name='payment_razorpay_verify'),
    path('cash/initiate/', CashPaymentInitiateView.as_view(), name='payment_cash_initiate'),
    path('cash/verify/', CashPaymentVerifyView.as_view(), name='payment_cash_verify'),
    path('status/<int:booking_id>/', PaymentStatusView.as_view(), name='payment_status'),
    path('webhook/', RazorpayWebhookView.as_view(), name='payment_webhook'),
]
