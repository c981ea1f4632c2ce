"""
URL configuration for the factory ERP backend.

Every app mounts its routes under /api/v1/.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "Factory ERP Admin Panel"
admin.site.site_title = "Factory ERP Admin Portal"
admin.site.index_title = "Production, Quality, Logistics and Finance"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('backend.core.urls')),
    path('api/v1/', include('backend.parties.urls')),
    path('api/v1/', include('backend.production.urls')),
    path('api/v1/', include('backend.purchasing.urls')),
    path('api/v1/', include('backend.inventory.urls')),
    path('api/v1/', include('backend.quality.urls')),
    path('api/v1/', include('backend.logistics.urls')),
    path('api/v1/', include('backend.maintenance.urls')),
    path('api/v1/', include('backend.gate.urls')),
    path('api/v1/', include('backend.finance.urls')),
    path('api/v1/', include('backend.reports.urls')),
    re_path(r'^static/(?P<path>.*)$', serve, {'document_root': settings.STATIC_ROOT}),
]
