"""Root URL configuration.

File and folder endpoints are served by their own apps; this module
only mounts the admin.
"""

from django.contrib import admin
from django.urls import path

urlpatterns = [
    path('admin/', admin.site.urls),
]
