"""
Use Cases

Organized into domain folders:
- auth/: Signup, signin, session verification and password reset
"""
