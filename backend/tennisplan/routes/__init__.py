# backend/tennisplan/routes/__init__.py
# Infrastructure routes (intentionally unversioned)
# All application routes are in v1/
from . import prometheus as prometheus
