"""API version 1 routers."""
