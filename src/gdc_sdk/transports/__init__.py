# GDC Analytics SDK
# File: transports/__init__.py
# Version: v1

"""MCP transports."""
