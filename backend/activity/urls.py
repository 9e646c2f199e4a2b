from django.urls import path

from .views import ActivityFeedView, NotificationActionView, NotificationListView

urlpatterns = [
    path('activity/', ActivityFeedView.as_view(), name='activity-feed'),
    path('notifications/', NotificationListView.as_view(), name='notification-list'),
    path('notifications/<int:pk>/hover/', NotificationActionView.as_view(toast_action='hover'), name='notification-hover'),
    path('notifications/<int:pk>/leave/', NotificationActionView.as_view(toast_action='leave'), name='notification-leave'),
    path('notifications/<int:pk>/dismiss/', NotificationActionView.as_view(toast_action='dismiss'), name='notification-dismiss'),
]
