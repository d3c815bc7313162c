"""
Polling app

Live polling sessions and their questions:
- join code allocation (codes.py)
- question mutability rules (guards.py, questions.py)
- active question pointer and countdown (timers.py)
- session status transitions (state.py, services.py)
- bounded delete/reset cascades and the stale-session sweep (cascade.py, tasks.py)
"""
__all__ = []
