from persistence.timeline_store import PersistenceError, TimelineStore

__all__ = ["PersistenceError", "TimelineStore"]
