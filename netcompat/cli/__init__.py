# netcompat/cli/__init__.py
