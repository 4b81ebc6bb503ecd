"""Authentication and authorization.

Learn: Email/password → bcrypt-verified login → stateless JWT bearer
token. Every protected request resolves the token back to a
CurrentUser, which the task service uses to scope its queries.
Logout is client-side only: there is no session table to clear.
"""
