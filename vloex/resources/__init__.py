from .journey import JourneyAuth, JourneyPage
from .videos import AsyncVideosResource, VideosResource

__all__ = ["VideosResource", "AsyncVideosResource", "JourneyPage", "JourneyAuth"]
