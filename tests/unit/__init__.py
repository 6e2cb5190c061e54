"""
Unit tests for ActivityDash application components.

AWS calls are intercepted by moto, and every time-dependent test pins
"now" with a fixed clock, so the suite is deterministic and offline.
"""
