"""Platform-specific query builders and services."""

from . import salesforce

__all__ = ['salesforce']
