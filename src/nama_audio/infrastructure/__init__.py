"""
Infrastructure Layer

Concrete adapters for the application ports:
- audio/: ffplay-backed playback engine
- catalog/: media-directory track catalog
- persistence/: SQLite ledger
"""
