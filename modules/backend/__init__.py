"""
NoteVault.

Notes management API: users own notes, share them with VIEW/EDIT grants
or publish them publicly. Every entity supports soft deletion and restore.

- core/: configuration, logging, errors, database, request plumbing
- models/: SQLAlchemy models
- repositories/: soft-delete aware data access
- services/: access policy, query criteria, note and user lifecycle
- schemas/: Pydantic request/response schemas
- api/: FastAPI routers
"""

__version__ = "0.1.0"
