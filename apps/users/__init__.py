"""Users app package.

Authentication itself is delegated to ``django.contrib.auth``. This app
only keeps what the booking core reads about a user: the device tokens
used for best-effort push delivery.
"""
