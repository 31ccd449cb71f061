"""
Malkhana app URL configuration.

Included in the project-level ``urls.py`` as::

    path('api/malkhana/', include('malkhana.urls')),

Endpoint Map
------------
Registers
    GET    /stats/                          → MalkhanaStatsView
    GET    /black-ink/                      → BlackInkRegisterView
    GET    /red-ink/                        → RedInkRegisterView
    GET    /search/?query=                  → MalkhanaSearchView
    GET    /mother-number/{mother_number}/  → MotherNumberLookupView
    POST   /year-transition/                → YearTransitionView

Items
    POST   /items/                          → MalkhanaItemViewSet.create
    GET    /items/{id}/                     → MalkhanaItemViewSet.retrieve
    PATCH  /items/{id}/                     → MalkhanaItemViewSet.partial_update
    POST   /items/{id}/dispose/             → MalkhanaItemViewSet.dispose
    POST   /items/{id}/assign-shelf/        → MalkhanaItemViewSet.assign_shelf
    POST   /items/{id}/qr-code/             → MalkhanaItemViewSet.qr_code

Shelves
    GET    /shelves/                        → ShelfViewSet.list
    POST   /shelves/                        → ShelfViewSet.create
    GET    /shelves/{id}/                   → ShelfViewSet.retrieve
    PATCH  /shelves/{id}/                   → ShelfViewSet.partial_update
    DELETE /shelves/{id}/                   → ShelfViewSet.destroy
    GET    /shelves/{id}/items/             → ShelfViewSet.items
    POST   /shelves/{id}/qr-code/           → ShelfViewSet.qr_code
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    BlackInkRegisterView,
    MalkhanaItemViewSet,
    MalkhanaSearchView,
    MalkhanaStatsView,
    MotherNumberLookupView,
    RedInkRegisterView,
    ShelfViewSet,
    YearTransitionView,
)

app_name = "malkhana"

router = DefaultRouter()
router.register(r"items", MalkhanaItemViewSet, basename="item")
router.register(r"shelves", ShelfViewSet, basename="shelf")

urlpatterns = [
    # ── Registers ────────────────────────────────────────────────────
    path("stats/", MalkhanaStatsView.as_view(), name="stats"),
    path("black-ink/", BlackInkRegisterView.as_view(), name="black-ink"),
    path("red-ink/", RedInkRegisterView.as_view(), name="red-ink"),
    path("search/", MalkhanaSearchView.as_view(), name="search"),
    path(
        "mother-number/<str:mother_number>/",
        MotherNumberLookupView.as_view(),
        name="mother-number",
    ),
    path("year-transition/", YearTransitionView.as_view(), name="year-transition"),

    # ── Router-registered viewsets (items/, shelves/) ────────────────
    path("", include(router.urls)),
]
