"""Workflow service - settings, logging, HTTP API and CLI around the execution core."""
