"""
services/ - Business Logic Layer
=================================
The interaction dispatcher and the services it drives: membership checks,
screen presentation, rendering and consultation notifications.
"""
