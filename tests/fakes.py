"""In-memory collaborators for driving the explorer in tests."""

from py_wilayah.data.sources import Fetcher, FetchResult


class StaticFetcher(Fetcher):
    """Completes every fetch immediately from an in-memory table."""

    def __init__(self, collections):
        self.collections = collections
        self.requested = []

    def fetch(self, url, on_result):
        self.requested.append(url)
        self._deliver(url, on_result)

    def _deliver(self, url, on_result):
        if url in self.collections:
            on_result(FetchResult(url=url, collection=self.collections[url], status=200))
        else:
            on_result(FetchResult.failure(url, f"Failed to fetch {url}: 404", status=404))


class DeferredFetcher(StaticFetcher):
    """Holds fetches until ``complete`` is called, in any order."""

    def __init__(self, collections):
        super().__init__(collections)
        self.pending = []

    def fetch(self, url, on_result):
        self.requested.append(url)
        self.pending.append((url, on_result))

    def complete(self, index=0):
        url, on_result = self.pending.pop(index)
        self._deliver(url, on_result)


class RecordingCamera:
    """Camera that records moves and settles only when told to."""

    def __init__(self):
        self.moves = []

    def fly_to_bounds(self, box, request_id):
        self.moves.append((box, request_id))

    @property
    def last_request_id(self):
        return self.moves[-1][1]


class RecordingView:
    def __init__(self):
        self.layers = []
        self.point_batches = []

    def show_regions(self, layer):
        self.layers.append(layer)

    def show_points(self, points):
        self.point_batches.append(list(points))

    @property
    def layer(self):
        return self.layers[-1] if self.layers else None

