"""
ledgerbook - Personal Multi-Currency Ledger Core

Import, reconciliation, export and reporting for a personal ledger of
income/expense records kept in several currencies.

DESIGN PRINCIPLES:
1. Money is integer minor units, never floats
2. Fail early, fail visibly, name the offending value
3. Every import and export is audited
4. Storage layer is swappable
"""

__version__ = "1.1.0"
__author__ = "ledgerbook maintainers"
