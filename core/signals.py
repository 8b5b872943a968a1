"""
Django signals for purchase side effects.
"""

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver
import logging

logger = logging.getLogger(__name__)


@receiver(post_save, sender='core.Purchase')
def purchase_created(sender, instance, created, **kwargs):
    """
    Send the purchase receipt once a new successful purchase is committed.
    A purchase rolled back by a lost reconciliation race sends nothing.
    """
    from core.models import Purchase
    from core.tasks import send_purchase_receipt

    if created and instance.status == Purchase.Status.SUCCESS:
        logger.info(f"Purchase {instance.id} recorded, queueing receipt")
        purchase_id = instance.id
        transaction.on_commit(lambda: send_purchase_receipt(purchase_id))
