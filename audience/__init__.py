"""
Audience app

Participants joining a session by code and the responses they submit.
The polling lifecycle only reaches this data through `audience.stores`
(bounded deletes, counts, aggregation).
"""
__all__ = []
