"""Fuzz testing infrastructure for flexexpander.

This package contains:
- test_template_oracle: Differential and stateful fuzzing of compile/expand

Python 3.13+.
"""
