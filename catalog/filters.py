import django_filters
from django.db.models import Q

from .models import Product


class ProductFilter(django_filters.FilterSet):
    category = django_filters.NumberFilter(field_name="category__id", lookup_expr="exact")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    featured = django_filters.BooleanFilter(field_name="is_featured")
    in_stock = django_filters.BooleanFilter(method="filter_in_stock")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Product
        fields = ["category", "featured"]

    def filter_in_stock(self, queryset, name, value):
        available = Q(track_quantity=False) | Q(quantity__gt=0) | Q(allow_backorder=True)
        return queryset.filter(available) if value else queryset.exclude(available)

    def filter_search(self, queryset, name, value):
        # on the JSON tags list this matches a whole tag, case-insensitively
        return queryset.filter(
            Q(name__icontains=value)
            | Q(description__icontains=value)
            | Q(sku__icontains=value)
            | Q(tags__icontains=value)
        )
