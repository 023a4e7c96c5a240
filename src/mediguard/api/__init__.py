"""API layer - FastAPI application"""
