"""
Pagination for list endpoints.

Presenter dashboards page through their sessions; clients may ask for a
smaller or larger page with `?page_size=` up to `max_page_size`.
"""
from rest_framework.pagination import PageNumberPagination


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100
