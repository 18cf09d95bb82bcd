"""
models/ - Domain Layer
=======================
Plain dataclasses and enums: guides, screens, inbound events,
membership status and consultation requests. No I/O.
"""
