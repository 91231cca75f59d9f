"""Provider doubles and canned streams for orchestrator and route tests."""

from streamresolver.models.media import MediaType
from streamresolver.models.streams import ScrapeResult, Stream, StreamQuality, StreamType
from streamresolver.providers.registry import Provider


class FakeProvider(Provider):
    """Reports the given checkpoints, then returns ``result`` or raises ``error``."""

    def __init__(self, provider_id, rank, *, result=None, error=None,
                 media_types=(MediaType.MOVIE, MediaType.SERIES), checkpoints=(25, 75), calls=None):
        self.id = provider_id
        self.display_name = provider_id.title()
        self.rank = rank
        self.media_types = frozenset(media_types)
        self.result = result
        self.error = error
        self.checkpoints = checkpoints
        self.calls = calls if calls is not None else []

    async def scrape(self, ctx):
        self.calls.append(self.id)
        for value in self.checkpoints:
            ctx.progress(value)
        if self.error is not None:
            raise self.error
        return self.result


def make_stream(url="https://aws-cdn.example/a.m3u8", quality=StreamQuality.Q720P):
    return Stream(stream_url=url, type=StreamType.HLS, quality=quality, captions=[])


def make_result(url="https://aws-cdn.example/a.m3u8"):
    return ScrapeResult(embeds=[], stream=make_stream(url))
