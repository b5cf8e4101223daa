from rest_framework.pagination import LimitOffsetPagination


class StandardPagination(LimitOffsetPagination):
    """
    limit/offset paging used by every list endpoint.
    """

    default_limit = 50
    max_limit = 200
