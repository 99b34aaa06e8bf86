from rest_framework import status as http_status
from rest_framework.response import Response


def api_response(data=None, message=None, status=http_status.HTTP_200_OK, pagination=None):
    body = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    if pagination is not None:
        body["pagination"] = pagination
    return Response(body, status=status)
