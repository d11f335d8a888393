from concurrent.futures import ThreadPoolExecutor, as_completed


class PoolResult:
    """Outcome of one pool action: either a value or the error it raised."""

    def __init__(self, item, value=None, error=None):
        self.item = item
        self.value = value
        self.error = error

    @property
    def ok(self):
        return self.error is None

    def __repr__(self):
        if self.ok:
            return f"PoolResult({self.item!r}, value={self.value!r})"
        return f"PoolResult({self.item!r}, error={self.error!r})"


class BoundedTaskPool:
    def __init__(self, max_workers: int = 5):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.max_workers = max_workers

    @staticmethod
    def _attempt(action, item):
        try:
            return PoolResult(item, value=action(item))
        except Exception as e:
            return PoolResult(item, error=e)

    def run(self, items, action, on_complete=None):
        """
        Call action(item) for every item with at most max_workers calls in flight.
        Returns one PoolResult per item in completion order. Failures are captured
        in the result, never raised, so the caller decides what a failure means.
        on_complete is called from the calling thread once per finished item.
        """
        items = list(items)
        if not items:
            return []

        results = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(self._attempt, action, item) for item in items]
            for future in as_completed(futures):
                result = future.result()
                results.append(result)
                if on_complete is not None:
                    on_complete(result)
        return results
