# SQLAlchemy models; importing this package registers every table on Base.metadata
from modules.backend.models.base import Base
from modules.backend.models.note import Note
from modules.backend.models.note_access import AccessType, NoteAccess
from modules.backend.models.user import User

__all__ = [
    "AccessType",
    "Base",
    "Note",
    "NoteAccess",
    "User",
]
