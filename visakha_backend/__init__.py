"""
Visakha admin backend: feedback review and golden knowledge curation for the
Visakha chatbot.
"""
