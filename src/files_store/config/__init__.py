"""
Configuration management for the Files Store.

Contains Pydantic settings read from the environment and an optional .env file.
"""
