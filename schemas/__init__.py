"""
Pydantic schemas for Aasha Backend.

Contains all API request/response schemas organized by module.
"""
