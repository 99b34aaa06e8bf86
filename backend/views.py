from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny

from backend.responses import api_response


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def api_root(request):
    base = request.build_absolute_uri("/").rstrip("/")
    return api_response(
        data={"api_base": f"{base}/api"},
        message="E-commerce platform api is running",
    )
