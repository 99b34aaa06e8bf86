import math

from rest_framework.pagination import PageNumberPagination

from backend.responses import api_response


def pagination_meta(total, page, limit):
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
    }


class EnvelopePagination(PageNumberPagination):
    page_size = 20
    page_query_param = "page"
    page_size_query_param = "limit"
    max_page_size = 100

    def get_paginated_response(self, data):
        return api_response(
            data=data,
            pagination=pagination_meta(
                self.page.paginator.count,
                self.page.number,
                self.page.paginator.per_page,
            ),
        )
