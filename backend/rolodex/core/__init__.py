"""Core interfaces and their implementations.

This package separates the contacts business logic from the infrastructure
it runs on (SQL store, user table, randomness).
"""
