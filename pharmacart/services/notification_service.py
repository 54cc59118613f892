# pharmacart/services/notification_service.py
from pharmacart.celery_worker import celery_app
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Customer notifications, processed asynchronously by Celery.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int):
        """
        Queues the "payment received, order confirmed" notification.
        """
        send_order_notification_task.delay(user_id, order_id)


@celery_app.task(name="pharmacart.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int):
    """
    Delivery channel (email/SMS) is owned by another service; this task logs
    the event that channel consumes.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} payment confirmed")

    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
