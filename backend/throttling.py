from django.conf import settings
from rest_framework.throttling import SimpleRateThrottle


class WindowedRateThrottle(SimpleRateThrottle):
    """Per-client ceiling over ``RATE_LIMIT_WINDOW_SECONDS``.

    Authenticated callers are keyed by user id, anonymous ones by address.
    """

    scope = "windowed"

    def get_rate(self):
        return f"{settings.RATE_LIMIT_MAX_REQUESTS}/{settings.RATE_LIMIT_WINDOW_SECONDS}"

    def parse_rate(self, rate):
        num_requests, duration = rate.split("/")
        return int(num_requests), int(duration)

    def get_cache_key(self, request, view):
        if request.user and request.user.is_authenticated:
            ident = request.user.pk
        else:
            ident = self.get_ident(request)
        return self.cache_format % {"scope": self.scope, "ident": ident}
