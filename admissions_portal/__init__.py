"""
Admissions Portal
Student-facing admissions and application engine.

Architecture:
- MongoDB: applications, credential metadata, notifications
- Services: eligibility, quotas, status lifecycle, offer reconciliation
- FastAPI: typed HTTP surface over the services
"""

__version__ = "1.0.0"
