"""
handlers/ - Presentation Layer
================================
Telegram bot handlers. Each handler turns a Telegram update into an
InboundEvent, hands it to the InteractionDispatcher, and lets the
dispatcher's render adapter answer the user.
No business logic lives here.
"""
