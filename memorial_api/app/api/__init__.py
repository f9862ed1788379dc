"""
API package.

``pages`` serves the site root (page, guestbook JSON and submissions on
one URL); versioned JSON routes live in subpackages such as ``v1``.
"""
