"""Pydantic request/response and snapshot models."""
