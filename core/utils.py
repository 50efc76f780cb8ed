from rest_framework import permissions


class IsCustomer(permissions.BasePermission):
    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return hasattr(request.user, 'customer')


class IsWorker(permissions.BasePermission):
    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return hasattr(request.user, 'worker')


class IsModerator(permissions.BasePermission):
    """Service agents and admins review worker verification."""
    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return request.user.is_superuser or hasattr(request.user, 'service_agent')


def paginate(queryset, request, default_limit=10, max_limit=100):
    """Slice a queryset by ?page and ?limit, returning (items, pagination)."""
    try:
        page = max(int(request.query_params.get('page', 1)), 1)
    except (TypeError, ValueError):
        page = 1
    try:
        limit = min(max(int(request.query_params.get('limit', default_limit)), 1), max_limit)
    except (TypeError, ValueError):
        limit = default_limit

    total = queryset.count()
    offset = (page - 1) * limit
    items = queryset[offset:offset + limit]
    pagination = {
        'page': page,
        'limit': limit,
        'total': total,
        'pages': (total + limit - 1) // limit,
    }
    return items, pagination
