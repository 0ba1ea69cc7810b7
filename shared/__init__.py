"""
Shared Kernel

Base classes and value objects shared across the domain packages.
"""
