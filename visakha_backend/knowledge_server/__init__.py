"""
Knowledge Search Tool Process
=============================

A stdio tool server exposing `search_golden_knowledge` to chatbot agents. It
reads the `rag_knowledge` collection that the admin sync publishes.

Run with ``python -m visakha_backend.knowledge_server``.
"""
