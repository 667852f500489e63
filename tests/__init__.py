"""
Tests package - test suite for the webhook certificate job.

Contains:
- unit/: Unit tests for individual components and reconciliation scenarios
- fixtures/: In-memory object store and CRD builders
"""
