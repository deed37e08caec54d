"""
Test suite for the deferred value engine.

Focus areas:
- Settle-once state transitions
- then/catch chaining and flattening
- all/race combinators
- Cross-thread settlement
- Threaded HTTP transport and CLI
"""
