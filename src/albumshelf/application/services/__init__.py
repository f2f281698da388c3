"""Application services."""

from albumshelf.application.services.album_reconciler import AlbumReconciler

__all__ = ["AlbumReconciler"]
