import django_filters

from modules.catalog.models import Product


class ProductSearchFilter(django_filters.FilterSet):
    """Search predicates: active flag, inclusive price bounds, free text.

    Free text is lower-cased here and matched against the lower-cased
    ``search_text`` column, so two queries sharing a search cache key
    always select the same rows.
    """

    is_active = django_filters.BooleanFilter(field_name="is_active")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    q = django_filters.CharFilter(method="filter_text")

    class Meta:
        model = Product
        fields = ["is_active", "min_price", "max_price", "q"]

    def filter_text(self, queryset, name, value):
        return queryset.filter(search_text__contains=value.lower())
