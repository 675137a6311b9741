"""
Real-time push channel (Socket.IO).

Clients connect to ``/socket.io``; every successful create, update or delete
is broadcast to all of them, whichever path (REST or socket) triggered it.
"""
