from srag_dashboard.models.tables import Base, SragCase

__all__ = ["Base", "SragCase"]
