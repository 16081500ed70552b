"""
Application Layer

Contains the use cases that orchestrate domain objects and infrastructure.

Structure:
- services/: The playback session service, completion routing and results
- interfaces/: Port interfaces for infrastructure adapters
"""
