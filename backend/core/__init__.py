"""Core decision logic: indicators, features, alphas, policy and risk.

This package contains pure business logic with no I/O dependencies
(no Redis or network access). The normalization cache is reached only
through the NormalizationCache protocol; app/ provides the Redis-backed
implementation.
"""
