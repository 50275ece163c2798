"""Requirement gathering platform for identity-governance questionnaires."""

from .main import create_application

__all__ = ["create_application"]
