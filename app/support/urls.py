"""
URL configuration for support app.
"""

from django.urls import path

from support.views import SupportAcknowledgementView

app_name = "support"

urlpatterns = [
    path(
        "acknowledgements/",
        SupportAcknowledgementView.as_view(),
        name="acknowledgements",
    ),
]
