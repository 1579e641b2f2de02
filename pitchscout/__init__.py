"""
PitchScout
==========

AI scouting backend for youth football:
- Video analysis, scouting reports and club matching via an AI gateway
- Streamed coaching chat
- Player profiles, reference clubs and video uploads
- Per-user daily request ceilings
"""

__version__ = "1.0.0"
