"""Geo Attendance package.

Geofence-gated event attendance organized by feature modules (geofence,
events, attendance, nearby) with a thin Flask controller layer over
service/repository layers.
"""
