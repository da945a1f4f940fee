"""
Property-based tests for the CHIP-8 instruction set.

This package hosts Hypothesis strategies and the test entrypoints for both
the fast CI lane and the nightly fuzz job.
"""
