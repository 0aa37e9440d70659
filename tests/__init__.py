"""Test suite for the FormCraft form schema engine.

This package contains tests for:
- Field type definitions (defaults, configuration rules, value rules)
- Field type registry (resolution, construction, aliasing)
- Designer document model (insert, remove, move, update, select, round-trip)
- Submission validation (per-field verdicts, aggregate, determinism)
- Form lifecycle state machine, event stream and runtime
"""
