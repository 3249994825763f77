"""Analysis API routers."""
