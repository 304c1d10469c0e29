"""
SessionKit - Server-side session management

Correlates stateless HTTP requests from one client with a server-side
state bag, using an unpredictable token carried by a cookie or URL parameter.

Architecture:
- Each module is self-contained with clear interfaces
- Storage backends are replaceable providers
- All communication through defined interfaces

Modules:
- idgen: Session token generation
- registry: Provider name bindings
- session: Session manager and expiration sweeper
- transport: Cookie and URL parameter handling
- storage: Memory and Redis providers
- api: Demo API models
"""

__version__ = "1.0.0"
