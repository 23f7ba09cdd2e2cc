"""
Shared utilities for the ACL engine.

This package aggregates common building blocks consumed by service_acl:

- config: Engine configuration via pydantic-settings
- logging: Structured logging with correlation context
- metrics: Prometheus counters for lookups, store writes and decisions
- errors: Canonical error types and responses

Do not import from service_* packages into shared/.
"""
