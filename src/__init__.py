"""
Personal Ledger - Source Package

A small bookkeeping core for personal accounts: named accounts with
non-negative balances, an append-only transaction history per account,
deposits, withdrawals and transfers, persisted to a local snapshot file.

DESIGN PRINCIPLES:
1. Balance and history never diverge
2. Fail early, fail visibly: malformed input raises, refusals return False
3. No silent corrections
4. Every operation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Personal Ledger Team"
