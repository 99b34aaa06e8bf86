from django.urls import path

from .views import LoginView, ProfileView, RefreshTokenView, RegisterUserView

urlpatterns = [
    path("register/", RegisterUserView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("refresh/", RefreshTokenView.as_view(), name="token-refresh"),
    path("profile/", ProfileView.as_view(), name="profile"),
]
