"""Application layer: cache-first fetching, services, DTOs and ports.

Depends only on the domain and on protocol definitions; infrastructure
implements the interfaces (repositories, external clients).
"""
