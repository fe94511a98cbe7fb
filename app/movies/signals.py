"""
Signal receivers for the movies app.

The previous theatre status is stashed on the instance before save so that
post_save receivers (notifications.handlers) can detect review decisions.
"""

from django.db.models.signals import pre_save
from django.dispatch import receiver

from movies.models import Theatre


@receiver(pre_save, sender=Theatre, dispatch_uid="stash_theatre_status")
def stash_previous_status(sender, instance: Theatre, **kwargs):
    if instance._state.adding:
        instance._previous_status = None
        return
    instance._previous_status = (
        Theatre.objects.filter(pk=instance.pk).values_list("status", flat=True).first()
    )
