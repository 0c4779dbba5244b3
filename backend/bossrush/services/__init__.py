"""
BossRush Backend — Services Layer
===================================

What:  Business logic between routes (HTTP) and the external backend.

Service Inventory:
    - BackendService (abstract): Capability interface of the auth + storage backend
    - SupabaseService: Concrete implementation over the Supabase REST API (httpx)
    - GameService: The seven API operations and their error-to-status mapping

Routes handle HTTP, GameService handles the operation, BackendService
implementations handle the wire. Any layer can be tested without the ones
above it.
"""
