"""
API Layer for the Face Capture Gate

This package provides the FastAPI-based API layer that exposes:
- REST endpoint for evaluating a single observation
- WebSocket endpoint for real-time capture guidance, frame by frame
- Health check endpoint
"""
