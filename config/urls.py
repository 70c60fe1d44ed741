from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from common.views import health_check

admin.site.site_header = "TeamDaily administration"
admin.site.site_title = "TeamDaily admin"
admin.site.index_title = "Team management"

urlpatterns = [
    path("health/", health_check, name="health"),
    path("admin/", admin.site.urls),

    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    path("api/v1/accounts/", include("accounts.urls")),
    path("api/v1/reports/", include("reports.urls")),
    path("api/v1/common/", include("common.urls")),
]
