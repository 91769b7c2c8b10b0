"""Test suite for brandlattice.

Test Structure:
- unit/: Unit tests for individual components
  - color/: Color parsing, perceptual distance, contrast and adjustment
  - manifold/: State distance metric and brand membership
  - models/: Manifest and brand profile models
  - validation/: Predicates, validator, ground state and escape paths
  - config/: Config and input loading
  - cli/: Command-line interface
  - utils/: Unit parsing, math and logging helpers
- conftest.py: Shared fixtures
"""
