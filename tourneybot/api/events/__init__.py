"""Event read/update resources.

Usage
-----
Import event resources for route registration::

    from tourneybot.api.events.resources import EventResource, PasswordCheckResource
"""
