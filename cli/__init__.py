"""
Deferred CLI - HTTP requests on the deferred value engine

Commands:
- deferred fetch - Single request, body or full response
- deferred all - Concurrent requests joined with DeferredValue.all
- deferred race - Concurrent requests, first to settle wins
- deferred version - Version information
"""

__version__ = "0.1.0"
