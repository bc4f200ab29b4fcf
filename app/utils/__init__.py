"""Small helpers shared across VidShare services (S3 client)."""

__all__: list[str] = []
