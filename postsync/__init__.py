"""postsync — client-side post replica kept in sync over REST and push events."""

__version__ = "0.1.0"
