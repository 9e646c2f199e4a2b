import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver
from django.forms.models import model_to_dict

from activity.bus import EventType, publish

from .models import Course, Department, Faculty, Student

logger = logging.getLogger(__name__)

# model -> (added, updated, deleted)
MODEL_EVENTS = {
    Student: (EventType.STUDENT_ADDED, EventType.STUDENT_UPDATED, EventType.STUDENT_DELETED),
    Faculty: (EventType.FACULTY_ADDED, EventType.FACULTY_UPDATED, EventType.FACULTY_DELETED),
    Course: (EventType.COURSE_ADDED, EventType.COURSE_UPDATED, EventType.COURSE_DELETED),
    Department: (EventType.DEPARTMENT_ADDED, EventType.DEPARTMENT_UPDATED, EventType.DEPARTMENT_DELETED),
}


def entity_payload(instance) -> dict:
    data = model_to_dict(instance)
    data['id'] = instance.pk
    return data


def _is_soft_delete(instance, update_fields) -> bool:
    return bool(update_fields) and 'deleted_at' in update_fields and getattr(instance, 'deleted_at', None) is not None


@receiver(post_save, sender=Student)
@receiver(post_save, sender=Faculty)
@receiver(post_save, sender=Course)
@receiver(post_save, sender=Department)
def record_saved(sender, instance, created, raw=False, update_fields=None, **kwargs):
    if raw:
        return
    added, updated, deleted = MODEL_EVENTS[sender]
    if created:
        event = added
    elif _is_soft_delete(instance, update_fields):
        event = deleted
    else:
        event = updated
    logger.debug('%s %s -> %s', sender.__name__, instance.pk, event.value)
    publish(event, entity_payload(instance))


@receiver(post_delete, sender=Student)
@receiver(post_delete, sender=Faculty)
@receiver(post_delete, sender=Course)
@receiver(post_delete, sender=Department)
def record_deleted(sender, instance, **kwargs):
    publish(MODEL_EVENTS[sender][2], entity_payload(instance))
