"""
Configuration management for the uploads API.

Contains the Pydantic settings read from the environment and `.env`.
"""
