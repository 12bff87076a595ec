"""Rule and authorization layer.

Every operation takes the acting :class:`~app.services.access.Actor` plus
validated parameters, works on the shared ``db.session`` and commits once.
Failures are raised as the tagged errors in :mod:`app.errors`.
"""
