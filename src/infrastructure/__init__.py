"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- snowflake: Database persistence (profiles and performance records)
- storage: Object storage (R2/S3) for archived exports

These wrappers translate between external formats and our domain models.
"""
