"""
@file __init__.py
@brief SafeEscape backend application package initialization

@details
Evacuation route optimization and safe-zone selection service.

**Package Structure:**
- api/: FastAPI route handlers, request schemas and dependencies
- core/: Configuration, logging, cache, errors, middleware, fan-out helper
- models/: Evacuation value types and per-disaster rule tables
- services/: Geo provider, safe-zone selector, route scorer, advisory, planner

@author SafeEscape Project
@date 2025-12-18
@version 1.0
@license AGPL-3.0

@see main for FastAPI application setup
@see services.evacuation for the planning strategy
"""
