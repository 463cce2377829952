"""
Application Modules.

- backend/: NoteVault notes API, database, configuration
"""
