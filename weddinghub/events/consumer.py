import asyncio, json
from aio_pika import connect_robust, ExchangeType
from weddinghub.core.config import settings
from weddinghub.core.logging import logger
from weddinghub.events.publisher import EXCHANGE_NAME
from weddinghub.websocket.manager import manager

QUEUE_NAME = "weddinghub.admin-notifications"

async def handle_message(body: bytes):
    """Relay RSVP events to every admin connected to the dashboard."""
    data = json.loads(body.decode())
    typ = data.get("type")
    if typ == "rsvp.submitted":
        await manager.broadcast({
            "type": "rsvp.submitted",
            "guest_id": data.get("guest_id"),
            "guest_name": data.get("guest_name"),
            "status": data.get("status"),
        })
    else:
        logger.debug(f"Ignoring event of type {typ!r}")

async def run_worker():
    max_retries = 10
    delay = 5  # seconds
    for attempt in range(1, max_retries + 1):
        try:
            connection = await connect_robust(settings.RABBITMQ_URL)
            logger.info("Successfully connected to RabbitMQ")
            break
        except Exception as e:
            logger.error(f"RabbitMQ connection failed (attempt {attempt}/{max_retries}): {e}")
            if attempt == max_retries:
                raise
            await asyncio.sleep(delay)
    channel = await connection.channel()
    exchange = await channel.declare_exchange(EXCHANGE_NAME, ExchangeType.TOPIC, durable=True)
    queue = await channel.declare_queue(QUEUE_NAME, durable=True)
    await queue.bind(exchange, routing_key="rsvp.*")
    async with queue.iterator() as queue_iter:
        async for message in queue_iter:
            async with message.process():
                try:
                    await handle_message(message.body)
                except Exception as e:
                    logger.error(f"Error handling message: {e}", exc_info=True)
