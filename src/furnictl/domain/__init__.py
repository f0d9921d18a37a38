"""Domain layer — pricing rules, promotions, and analytics aggregations.

This layer depends only on stdlib and pydantic.
It must never import from services, commands, config, or output.
Every function here is pure: no I/O, no logging, no clock access.
"""
