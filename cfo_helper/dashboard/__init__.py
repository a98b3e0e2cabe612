"""Dashboard - per-user session state and the routes that drive it.

Each signed-in user gets a DashboardSession holding the current inputs,
the latest projection, usage counters, the mock history series and an
AdvisorSession. Sessions live in process memory only.
"""
