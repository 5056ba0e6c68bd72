"""
URL mappings for the clinic API.

Resource endpoints are generated from the catalog in
:mod:`records.services.catalog`; the remaining routes are listed by
hand.  Trailing slashes are omitted throughout.
"""
from django.urls import include, path

from .services.catalog import RESOURCES
from .views import admissions, auth, billing, dashboard, health, profile
from .views.resources import COLLECTION_VIEWS, DETAIL_VIEWS

urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Authentication
    path('api/auth/login', auth.login_view),
    path('api/auth/register', auth.register_view),
    path('api/auth/logout', auth.logout_view),
    path('api/auth/me', auth.me_view),
    path('api/auth/check', auth.check_view),
    path('api/auth/refresh', auth.refresh_view),
    # Profile / dashboard
    path('api/profile', profile.profile),
    path('api/dashboard', dashboard.dashboard),
    # Operations that are more than a field update
    path('api/bills/<str:pk>/payments', billing.bill_payments),
    path('api/ipd-patients/<str:pk>/discharge', admissions.discharge_admission),
]

for name in RESOURCES:
    urlpatterns += [
        path(f'api/{name}', COLLECTION_VIEWS[name]),
        path(f'api/{name}/<str:pk>', DETAIL_VIEWS[name]),
    ]
