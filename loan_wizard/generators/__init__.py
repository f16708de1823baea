"""Synthetic data generators."""

from loan_wizard.generators.draft import DraftGenerator

__all__ = ["DraftGenerator"]
