from common.models import Notification


class NotificationService:

    @staticmethod
    def send(user, content, type=Notification.Type.SYSTEM, report=None):
        return Notification.objects.create(
            user=user,
            type=type,
            content=content,
            report=report,
        )

    @staticmethod
    def unread_count(user) -> int:
        return Notification.objects.filter(user=user, is_read=False).count()

    @staticmethod
    def mark_read(user, notification_id):
        """
        Marks one of ``user``'s notifications read. Returns the notification,
        or None when it does not belong to the user.
        """
        notification = Notification.objects.filter(
            id=notification_id,
            user=user,
        ).first()
        if notification is None:
            return None
        notification.mark_read()
        return notification

    @staticmethod
    def mark_all_read(user) -> int:
        return Notification.objects.filter(
            user=user,
            is_read=False,
        ).update(is_read=True)
