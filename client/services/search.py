class SearchService:
    def __init__(self, api):
        self.api = api

    def search_workers(self, filters):
        # Blank filters are left out of the query string
        params = {key: value for key, value in filters.items() if value not in (None, '')}
        return self.api.get('/api/customers/search/', params=params)

    def get_search_filters(self):
        return self.api.get('/api/customers/filters/')

    def get_worker_profile(self, worker_id):
        return self.api.get(f'/api/customers/worker/{worker_id}/')
