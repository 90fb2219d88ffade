"""Test suite for jugglr.

Test Structure:
- unit/notation/mhn/: matrix resolution stages, timing and event synthesis
- unit/config/: config models and the JSON/YAML loader
- unit/utils/: logging and math helpers
- conftest.py: shared matrices and compile configs
"""
