"""
Image Upload Domain

Moves images from the local inbox directory and from HTTP requests into
object storage:
- Executor → one public-read upload attempt, failures returned as values
- Reconciler → full scan-and-upload sweep over the inbox directory
- Watcher → uploads images that appear in the inbox after startup

Local files are never deleted; the inbox can always be rescanned.
"""

__all__ = ["executor", "reconciler", "watcher"]
