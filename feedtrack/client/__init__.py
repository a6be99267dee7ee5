from feedtrack.client.api_client import FeedTrackClient

__all__ = ["FeedTrackClient"]
