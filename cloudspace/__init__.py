"""Cloudspace: multi-tenant workspace and file storage service."""
