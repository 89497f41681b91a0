"""Realtime push client (Socket.IO).

The admin API pushes domain events (bookings, salons, payments, users, system
notices) over one Socket.IO connection; :class:`RealtimeClient` keeps that
connection and fans events out to local subscribers.
"""
