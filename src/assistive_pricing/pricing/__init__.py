"""Price-label derivation and reconciliation for GitHub issues.

Provides:
- label ordering by configured magnitude
- the price formula
- recognition of time/priority labels
- reconciliation of the price label against the issue's label history
- parent issue aggregation
"""
