"""API endpoint routers, registered by ``imgtoolbox.main.create_app``."""
