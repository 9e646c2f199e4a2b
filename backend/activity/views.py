from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .bus import get_activity_bus
from .notifications import get_notification_center


class ActivityFeedView(APIView):
    """Most recent domain activity, newest first."""
    permission_classes = (permissions.IsAuthenticated,)

    def get(self, request):
        return Response({'activities': get_activity_bus().feed()})


class NotificationListView(APIView):
    permission_classes = (permissions.IsAuthenticated,)

    def get(self, request):
        return Response({'notifications': get_notification_center().snapshot()})

    def delete(self, request):
        get_notification_center().clear_all()
        return Response({'notifications': []})


class NotificationActionView(APIView):
    """Pointer and dismiss actions on a single toast."""
    permission_classes = (permissions.IsAuthenticated,)
    toast_action = None
    not_found_message = 'Notification not found'

    def post(self, request, pk):
        center = get_notification_center()
        if self.toast_action == 'dismiss':
            if not center.dismiss(pk):
                return Response({'message': self.not_found_message}, status=status.HTTP_404_NOT_FOUND)
            return Response({'notifications': center.snapshot()})

        handler = center.pointer_enter if self.toast_action == 'hover' else center.pointer_leave
        toast = handler(pk)
        if toast is None:
            return Response({'message': self.not_found_message}, status=status.HTTP_404_NOT_FOUND)
        return Response({'notification': toast.as_dict(center.clock())})
