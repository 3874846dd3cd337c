"""
API router package for PushLedger.

Contains the FastAPI router modules for notifications and health.
"""
