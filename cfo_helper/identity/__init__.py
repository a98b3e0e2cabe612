"""Identity boundary.

Authentication lives with the hosted identity provider (Clerk). This package
only verifies session tokens, reads and writes the user's metadata bag, and
runs the onboarding sync into the profile table.
"""
