# netcompat/config/__init__.py
