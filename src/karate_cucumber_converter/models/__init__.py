"""Pydantic models for the Karate (source) and Cucumber (target) report schemas."""
