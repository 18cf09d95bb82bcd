"""
clients/ - External Collaborators
==================================
The chat transport interface and its python-telegram-bot implementation.
"""
