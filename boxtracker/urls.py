from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

urlpatterns = [
    path('admin/', admin.site.urls),
    # App
    path('', RedirectView.as_view(pattern_name='inventory:box_list', permanent=False)),
    path('inventory/', include('inventory.urls')),
]

handler404 = "inventory.views.error_404"
handler500 = "inventory.views.error_500"
