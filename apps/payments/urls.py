from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    # Payment processor server-side webhook (CSRF-exempt, HMAC-signed)
    path('webhook/', views.payment_webhook, name='webhook'),
]
