"""
Core business logic for performance analytics.

This module is framework-agnostic - it doesn't import FastAPI, Snowflake,
or any infrastructure concerns, so the analytics can be tested in
isolation.
"""
