"""Default bucket with a one-shot override."""

from typing import Optional


class BucketSelector:
    """
    Holds the default bucket and an optional pending override.

    The override is consumed by exactly one ``resolve()`` call. Not safe
    for interleaved use from several threads.
    """

    def __init__(self, default_bucket: str):
        self.default_bucket = default_bucket
        self.pending_override: Optional[str] = None

    def set_override(self, name: str) -> None:
        self.pending_override = name

    def resolve(self, explicit: Optional[str] = None) -> str:
        """
        Pick the bucket for one operation and clear the pending override.

        Args:
            explicit: Bucket passed directly to the operation, wins over
                the pending override

        Returns:
            Bucket name
        """
        pending, self.pending_override = self.pending_override, None
        if explicit is not None:
            return explicit
        if pending is not None:
            return pending
        return self.default_bucket
