from .database import Database, DATABASE_FILE

__all__ = ["Database", "DATABASE_FILE"]
