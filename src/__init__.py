"""
TalentTrack - athlete performance tracking and talent discovery.

This package contains the complete application:
- core: Framework-agnostic analytics and discovery logic
- infrastructure: External service integrations
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
