"""URL configuration for the admin namespace (gated by AdminBasicAuthMiddleware)."""

from django.urls import path

from . import views

app_name = 'backoffice'

urlpatterns = [
    path('', views.DashboardView.as_view(), name='dashboard'),
]
