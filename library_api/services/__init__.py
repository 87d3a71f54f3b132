"""
Services Package

Logic that is independent of the GraphQL layer and easier to test in
isolation:

- security.py: Bearer token signing/verification and the shared password check
- auth.py: Resolves an Authorization header to an authentication result
- events.py: In-process publish/subscribe behind the bookAdded subscription
"""
