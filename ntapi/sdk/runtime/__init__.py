"""Runtime transports: REST clients and runners, the streaming engine."""
