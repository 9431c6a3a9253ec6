"""
chek - integration test package

File: tests/integration/__init__.py
Last updated: 2026-10-18

Purpose
- Test package marker file for subprocess-level CLI contracts.

Functional requirements
- Must not import heavy modules at import time; keep test collection fast.
"""
