from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("TB_game.urls")),  # API lives under /api/ inside TB_game.urls
]
