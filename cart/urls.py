from django.urls import path

from .views import (
    CartAddView,
    CartItemView,
    CartView,
    WishlistAddView,
    WishlistItemView,
    WishlistView,
)

cart_urlpatterns = [
    path("", CartView.as_view(), name="cart"),
    path("add/", CartAddView.as_view(), name="cart-add"),
    path("<int:item_id>/", CartItemView.as_view(), name="cart-item"),
]

wishlist_urlpatterns = [
    path("", WishlistView.as_view(), name="wishlist"),
    path("add/", WishlistAddView.as_view(), name="wishlist-add"),
    path("<int:item_id>/", WishlistItemView.as_view(), name="wishlist-item"),
]
