# backend/tennisplan/routes/v1/__init__.py
"""
API v1 routes.

All routers are mounted below the /api/v1 prefix in main.py.
"""

from . import (
    admin,
    billing,
    calendar,
    health,
    newsletter,
    planning,
    players,
    rate_plans,
    registrations,
    sepa_mandates,
    substitutes,
    trainers,
    trainings,
)

__all__ = [
    "admin",
    "billing",
    "calendar",
    "health",
    "newsletter",
    "planning",
    "players",
    "rate_plans",
    "registrations",
    "sepa_mandates",
    "substitutes",
    "trainers",
    "trainings",
]
