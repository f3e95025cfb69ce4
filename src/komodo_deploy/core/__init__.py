"""
Core building blocks: Komodo client, Actions runtime, errors.
"""
