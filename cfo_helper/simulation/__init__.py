"""Simulation module.

Turns the dashboard's slider inputs into a monthly projection:
- engine.py: organization profiles and the projection function
- history.py: the mock historical series shown beside the projection
- context.py: the derived view handed to the advisor
"""
