"""
PushLedger REST API.

FastAPI-based HTTP server exposing notification creation, per-recipient
listing, lookup, mark-read and deletion, plus health and Prometheus
metrics endpoints.
"""
