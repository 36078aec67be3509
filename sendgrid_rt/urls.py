from django.urls import path

from sendgrid_rt.views import inbound

app_name = "sendgrid_rt"

urlpatterns = [
    path("", inbound.index, name="index"),
    # SendGrid Inbound Parse webhook (gated by SharedKeyMiddleware)
    path("parse/", inbound.parse_webhook, name="parse_webhook"),
]
