from django.contrib import admin
from django.urls import include, path

from backend.views import api_root
from cart.urls import cart_urlpatterns, wishlist_urlpatterns
from catalog.urls import category_urlpatterns, product_urlpatterns, review_urlpatterns

urlpatterns = [
    path("", api_root, name="api-root"),
    path("django-admin/", admin.site.urls),
    path("api/auth/", include("users.auth_urls")),
    path("api/users/", include("users.urls")),
    path("api/products/", include(product_urlpatterns)),
    path("api/categories/", include(category_urlpatterns)),
    path("api/reviews/", include(review_urlpatterns)),
    path("api/orders/", include("orders.urls")),
    path("api/cart/", include(cart_urlpatterns)),
    path("api/wishlist/", include(wishlist_urlpatterns)),
    path("api/admin/", include("dashboard.urls")),
    path("api/payments/", include("payments.urls")),
    path("api/upload/", include("uploads.urls")),
]
