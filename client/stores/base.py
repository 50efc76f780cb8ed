from client.http import ApiError


class Store:
    """Session state for one domain: a loading flag, the last error message and results."""

    def __init__(self):
        self.loading = False
        self.error = None

    def clear_error(self):
        self.error = None

    def _run(self, call, fallback_message):
        """Run a service call, recording loading and a displayable error; failures are re-raised."""
        self.loading = True
        self.error = None
        try:
            return call()
        except ApiError as e:
            self.error = e.message or fallback_message
            raise
        finally:
            self.loading = False
