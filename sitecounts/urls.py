from django.urls import path

from . import views


app_name = "sitecounts"

urlpatterns = [
    path("block/<int:item_id>/", views.block_data, name="block_data"),
]
