from client.services.search import SearchService
from .base import Store

# Filters that make a search worth sending
CRITERIA = ('skill', 'location', 'worker_name')


def default_filters():
    return {
        'skill': '',
        'service': '',
        'min_price': '',
        'max_price': '',
        'min_rating': '',
        'max_rating': '',
        'location': '',
        'worker_name': '',
        'worker_phone': '',
        'sort_by': 'relevance',
        'page': 1,
        'limit': 10,
    }


def default_pagination():
    return {'page': 1, 'limit': 10, 'total': 0, 'pages': 0}


def default_available_filters():
    return {
        'skills': [],
        'price_range': {'min_price': 0, 'max_price': 10000},
        'rating_range': {'min_rating': 0, 'max_rating': 5},
    }


class SearchStore(Store):
    def __init__(self, api):
        super().__init__()
        self.service = SearchService(api)
        self.workers = []
        self.selected_worker = None
        self.filters = default_filters()
        self.pagination = default_pagination()
        self.available_filters = default_available_filters()

    def set_filters(self, **updates):
        unknown = set(updates) - set(self.filters)
        if unknown:
            raise ValueError(f"Unknown search filters: {', '.join(sorted(unknown))}")
        self.filters.update(updates)

    def clear_filters(self):
        self.filters = default_filters()

    def reset(self):
        self.__init__(self.service.api)

    def has_search_criteria(self):
        return any(str(self.filters.get(key) or '').strip() for key in CRITERIA)

    def search_workers(self, **updates):
        if updates:
            self.set_filters(**updates)
        if not self.has_search_criteria():
            self.workers = []
            self.pagination = default_pagination()
            return self.workers

        response = self._run(lambda: self.service.search_workers(self.filters), 'Failed to search workers')
        self.workers = response.get('data', [])
        self.pagination = response.get('pagination', default_pagination())
        return self.workers

    def load_more(self):
        """Fetch the next page and append it to `workers`."""
        if self.pagination['page'] >= self.pagination['pages']:
            return []
        filters = dict(self.filters, page=self.pagination['page'] + 1)
        response = self._run(lambda: self.service.search_workers(filters), 'Failed to load more workers')
        more = response.get('data', [])
        self.workers = self.workers + more
        self.pagination = response.get('pagination', self.pagination)
        self.filters['page'] = self.pagination['page']
        return more

    def fetch_filters(self):
        response = self._run(self.service.get_search_filters, 'Failed to load search filters')
        self.available_filters = response.get('data', default_available_filters())
        return self.available_filters

    def fetch_worker_profile(self, worker_id):
        response = self._run(lambda: self.service.get_worker_profile(worker_id), 'Failed to load worker profile')
        self.selected_worker = response.get('data')
        return self.selected_worker
