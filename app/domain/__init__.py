"""
Domain layer containing core business logic and domain services.

Submodules:
- live: Streaming entities, transmission sessions and status views.
- utils: Authorization policy, ID generation, clock.
"""
