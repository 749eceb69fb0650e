"""
Use cases for the AnimalSOS API.

Each service orchestrates the storage backend to implement business rules
(registration and login, report status progression, campaign contributions).
Routers call these services instead of enforcing rules themselves.
"""
