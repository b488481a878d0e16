"""GitHub access for pricing: API client and per-issue label store."""
