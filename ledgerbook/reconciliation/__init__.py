"""Reconciliation package: merging imported rows and managing projects."""

from ledgerbook.reconciliation.projects import ProjectError, ProjectManager
from ledgerbook.reconciliation.reconciler import Reconciler

__all__ = ["ProjectError", "ProjectManager", "Reconciler"]
