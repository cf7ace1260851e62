"""Careerflow web layer: FastAPI app, SQLite store and remote clients."""
