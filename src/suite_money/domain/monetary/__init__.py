"""Monetary domain package.

This package contains the currency table (identifier -> static currency definition)
and the immutable Currency value created from it.
"""
