from typing import Optional
import asyncio

from supabase import create_async_client, AsyncClient
from supabase.lib.client_options import AsyncClientOptions

from vigil.utils.logger import logger
from vigil.utils.config import config

SUPABASE_CLIENT_TIMEOUT = 30  # seconds, applied to PostgREST/Storage/Functions


class DBConnection:
    """
    Lazily-initialized Supabase client.

    One instance is created per process in the API lifespan (or per script run)
    and handed to repositories explicitly; nothing here is a global singleton.
    """

    def __init__(self, url: Optional[str] = None, key: Optional[str] = None):
        self._url = url if url is not None else config.SUPABASE_URL
        self._key = key if key is not None else (config.SUPABASE_SERVICE_ROLE_KEY or config.SUPABASE_ANON_KEY)
        self._client: Optional[AsyncClient] = None
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self):
        if self._initialized:
            return

        async with self._lock:
            if self._initialized:
                return

            if not self._url or not self._key:
                logger.error("Missing required environment variables for Supabase connection")
                raise RuntimeError("SUPABASE_URL and a key (SERVICE_ROLE_KEY or ANON_KEY) environment variables must be set.")

            try:
                options = AsyncClientOptions(
                    postgrest_client_timeout=SUPABASE_CLIENT_TIMEOUT,
                    storage_client_timeout=SUPABASE_CLIENT_TIMEOUT,
                    function_client_timeout=SUPABASE_CLIENT_TIMEOUT,
                )
                self._client = await create_async_client(self._url, self._key, options=options)
            except Exception as e:
                logger.error(f"Database initialization error: {e}")
                raise RuntimeError(f"Failed to initialize database connection: {str(e)}")

            self._initialized = True
            key_type = "SERVICE_ROLE_KEY" if self._key == config.SUPABASE_SERVICE_ROLE_KEY else "ANON_KEY"
            logger.info(f"Database connection initialized with Supabase using {key_type}")

    async def disconnect(self):
        try:
            if self._client and hasattr(self._client, 'close'):
                await self._client.close()
        except Exception as e:
            logger.warning(f"Error during disconnect: {e}")
        finally:
            self._initialized = False
            self._client = None
            logger.info("Database disconnected successfully")

    @property
    async def client(self) -> AsyncClient:
        if not self._initialized:
            await self.initialize()
        if not self._client:
            logger.error("Database client is None after initialization")
            raise RuntimeError("Database not initialized")
        return self._client
