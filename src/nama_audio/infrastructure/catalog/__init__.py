from nama_audio.infrastructure.catalog.directory_catalog import DirectoryTrackCatalog

__all__ = ["DirectoryTrackCatalog"]
