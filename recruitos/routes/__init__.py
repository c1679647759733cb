"""
RecruitOS - API Routes
"""
from . import candidates, interviews, dashboard, database

__all__ = ["candidates", "interviews", "dashboard", "database"]
