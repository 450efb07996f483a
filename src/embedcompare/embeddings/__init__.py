"""Embedding vectors, model catalog and distance math."""
