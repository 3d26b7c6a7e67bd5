"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: Domain entities returned by the services
- Schemas: API contract (what client sends/receives)
"""
