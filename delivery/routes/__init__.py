"""API route modules."""
from delivery.routes import assessments, sessions, submissions

__all__ = ["assessments", "sessions", "submissions"]
