import redis.asyncio as redis
from dentalbill.core.config import settings

class RedisClient:
    def __init__(self):
        self.redis = redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)

    async def set_token(self, token: str, value: str, expire: int):
        await self.redis.set(f"token:{token}", value, ex=expire)

    async def get_token(self, token: str) -> str | None:
        return await self.redis.get(f"token:{token}")

    async def delete_token(self, token: str):
        await self.redis.delete(f"token:{token}")

    async def register_failed_login(self, email: str, window: int) -> int:
        key = f"login_failures:{email}"
        attempts = await self.redis.incr(key)
        if attempts == 1:
            await self.redis.expire(key, window)
        return attempts

    async def get_failed_logins(self, email: str) -> int:
        value = await self.redis.get(f"login_failures:{email}")
        return int(value) if value else 0

    async def clear_failed_logins(self, email: str):
        await self.redis.delete(f"login_failures:{email}")

    async def close(self):
        await self.redis.aclose()

redis_client = RedisClient()
