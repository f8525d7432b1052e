# artshelf/services/__init__.py

"""
Service layer of the Art Shelf gallery.

Each service owns a ``Database`` and opens short-lived sessions per call;
lookups that find nothing return ``None`` and leave the HTTP mapping to the
caller.
"""
