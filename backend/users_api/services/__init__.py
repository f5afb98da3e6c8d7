# Services package init
"""
Users API — Services Layer
============================

What:  Business logic and its collaborators, between routes (HTTP) and the database.

Service Inventory:
    - UserService: Orchestrates validation, existence/uniqueness checks, and writes
    - UserRepository: Persistence gateway over an injected AsyncSession
    - PasswordHasher: passlib-backed hash/verify
    - is_valid_email: Pure email-format predicate

Why services are separate from routes:
    1. Testability: UserService is unit-tested with a mocked repository
    2. Single responsibility: Routes handle HTTP; services handle rules
"""
