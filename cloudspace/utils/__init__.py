"""Helper functions shared by services and API routers."""
