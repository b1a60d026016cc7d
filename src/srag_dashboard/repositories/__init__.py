from srag_dashboard.repositories.case_repository import CaseRepository

__all__ = ["CaseRepository"]
