"""
Eater - Session Core

Secure credential storage and session handling for the eater client.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- storage: Redis connection ownership
- credentials: Encrypted key/value credential slots
- auth: Authenticator collaborators, result and error models
- session: Authenticated/unauthenticated state machine
- request: Authorization header injection for outbound calls
- orders: Order placement client
- api: Wire models and the in-memory mock backend
"""

__version__ = "1.0.0"
