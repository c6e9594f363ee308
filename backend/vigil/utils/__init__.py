"""
Utility modules shared across the backend.

Import directly from submodules:
    from vigil.utils.config import config
    from vigil.utils.logger import logger
"""
