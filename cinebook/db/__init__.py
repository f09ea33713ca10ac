"""Database engine, declarative base and session handling."""
