from abc import ABC
from vigil.services.supabase import DBConnection

class BaseRepository(ABC):
    def __init__(self, db: DBConnection):
        self._db = db

    async def _get_client(self):
        return await self._db.client
