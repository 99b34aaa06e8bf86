from django.urls import path

from .views import (
    AddressCreateView,
    AddressDetailView,
    ChangePasswordView,
    UserDetailView,
    UserListView,
)

urlpatterns = [
    path("", UserListView.as_view(), name="user-list"),
    path("<int:pk>/", UserDetailView.as_view(), name="user-detail"),
    path("<int:pk>/addresses/", AddressCreateView.as_view(), name="address-create"),
    path(
        "<int:pk>/addresses/<int:address_id>/",
        AddressDetailView.as_view(),
        name="address-detail",
    ),
    path("<int:pk>/password/", ChangePasswordView.as_view(), name="change-password"),
]
