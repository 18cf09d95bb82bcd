"""
repositories/ - Data Access Layer
==================================
Read-only access to data owned by the deployment: the guides catalog file
and the guide assets. Repositories return domain model objects.
"""
