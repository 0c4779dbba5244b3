"""
BossRush Backend — Application Package Initializer
===================================================

What: Marks the `bossrush` directory as a Python package.
Who:  Used by uvicorn (`bossrush.main:app`), pytest, and `python -m bossrush`.

Architecture Note:
    The backend owns no data. Every request is routed to a handler that
    forwards the operation to Supabase (auth + PostgREST storage):

    ┌─────────────────────────────────────┐
    │       Routes (static route table)   │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      GameService (orchestration)    │  ← status mapping, known gaps
    ├─────────────────────────────────────┤
    │   BackendService (capability API)   │  ← sign_up / get_user / select ...
    ├─────────────────────────────────────┤
    │   SupabaseService (httpx, per req)  │  ← REST wire protocol
    └─────────────────────────────────────┘

    Routes never talk to httpx directly, and the service layer never sees
    HTTP request objects.
"""

__version__ = "1.0.0"
