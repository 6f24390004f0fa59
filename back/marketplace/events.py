import json
import logging

import redis

from .settings import settings

logger = logging.getLogger(__name__)

redis_client: redis.Redis | None = None


def get_redis() -> redis.Redis | None:
    global redis_client
    if not settings.redis_url:
        return None
    if redis_client is None:
        try:
            redis_client = redis.from_url(settings.redis_url)
            redis_client.ping()
        except redis.RedisError as e:
            logger.warning(f"Redis unavailable at {settings.redis_url}: {e}")
            redis_client = None
    return redis_client


def publish_order_update(establishment_id: int, customer_id: int, order_data: dict) -> None:
    """Publish an order event for real-time consumers.

    Publishes to both:
    - orders:establishment:{establishment_id} - for the establishment owner
    - orders:customer:{customer_id} - for the customer who placed the order

    Best effort: the order is already committed when this runs.
    """
    r = get_redis()
    if r is None:
        return
    payload = json.dumps(order_data)
    try:
        r.publish(f"orders:establishment:{establishment_id}", payload)
        r.publish(f"orders:customer:{customer_id}", payload)
    except redis.RedisError as e:
        logger.warning(f"Failed to publish order event {order_data.get('type')}: {e}")
