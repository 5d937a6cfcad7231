"""Dispatch engine, response sending and transports."""
