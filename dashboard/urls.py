from django.urls import path

from .views import (
    AdminOrderListView,
    AdminOrderRefundView,
    AdminOrderStatusView,
    AdminProductListView,
    AdminUserListView,
    AdminUserToggleStatusView,
    DashboardView,
)

urlpatterns = [
    path("dashboard/", DashboardView.as_view(), name="admin-dashboard"),
    path("orders/", AdminOrderListView.as_view(), name="admin-orders"),
    path("orders/<int:pk>/status/", AdminOrderStatusView.as_view(), name="admin-order-status"),
    path("orders/<int:pk>/refund/", AdminOrderRefundView.as_view(), name="admin-order-refund"),
    path("products/", AdminProductListView.as_view(), name="admin-products"),
    path("users/", AdminUserListView.as_view(), name="admin-users"),
    path(
        "users/<int:pk>/toggle-status/",
        AdminUserToggleStatusView.as_view(),
        name="admin-user-toggle-status",
    ),
]
