from django.urls import path
from . import views
from .views.health import health_check, liveness_check, readiness_check, metrics

app_name = "inventory"

urlpatterns = [
    # Health checks (for load balancers and monitoring)
    path("health/", health_check, name="health"),
    path("health/liveness/", liveness_check, name="liveness"),
    path("health/readiness/", readiness_check, name="readiness"),
    path("health/metrics/", metrics, name="metrics"),

    # Boxes
    path("api/boxes/", views.box_list, name="box_list"),
    path("api/boxes/<int:pk>/", views.box_detail, name="box_detail"),
    path("api/boxes/<int:pk>/delete/", views.box_delete, name="box_delete"),
    path("api/boxes/uuid/<str:uuid>/", views.box_by_uuid, name="box_by_uuid"),

    # Items
    path("api/items/", views.item_list, name="item_list"),
    path("api/items/search/", views.item_search, name="item_search"),
    path("api/items/move-bulk/", views.item_move_bulk, name="item_move_bulk"),
    path("api/items/box/<str:box_uuid>/", views.item_list_by_box, name="item_list_by_box"),
    path("api/items/<int:pk>/", views.item_detail, name="item_detail"),
    path("api/items/<int:pk>/delete/", views.item_delete, name="item_delete"),
    path("api/items/<int:pk>/move/", views.item_move, name="item_move"),

    # Box number pool (staff only)
    path("api/box-numbers/status/", views.pool_status, name="box_number_status"),
]
