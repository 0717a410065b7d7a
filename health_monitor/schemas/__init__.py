"""Schemas — Pydantic request/response records for the API boundary."""
